from setuptools import setup

setup(
    name='hpc-quota',
    version='1.0',
    description='Normalized quota report for Lustre, GPFS, BeeGFS, NFS4 '
                'and Linux quota',
    author='HPC',
    license='GPLv3',
    packages=['hpcquota'],
    python_requires='>=3.5',
    install_requires=[
        'ansicolors',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points = {
        'console_scripts': [
        'hpc-quota = hpcquota.main:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: End Users/Desktop',
        'Natural Language :: English',
        'Operating System :: Unix',
        'Topic :: System :: Filesystems',
        'Topic :: Utilities',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
)

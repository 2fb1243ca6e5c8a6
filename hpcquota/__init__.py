# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4
"""Normalized disk quota reporting for Lustre, GPFS, BeeGFS, NFS4 and
   plain Linux quota."""

__version__ = "1.0"

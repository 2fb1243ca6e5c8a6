# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Site configuration.  The defaults below can be overridden from a [quota]
section in any of CONFIG_FILES, later files winning.  No file is read
from the working directory, root runs the binaries named here for -a.  Example:

[quota]
lfs_binary=/usr/bin/lfs
deploy_admin_group=umcg-depad
sub_groups=umcg-gonl-rar1, umcg-gonl-rar2
gpfs_filesystems=gpfs2:tmp02, gpfs3:prm03
command_timeout=120
"""

import collections
import configparser
import os

from hpcquota.errors import ConfigError

CONFIG_FILES = [
    "/etc/hpc-quota.cfg",
    os.path.expanduser("~/.config/hpc-quota.cfg"),
]

QUOTA_BINARY       = "/usr/bin/quota"
LFS_BINARY         = "lfs"
MMLSQUOTA_BINARY   = "/usr/lpp/mmfs/bin/mmlsquota"
BEEGFS_BINARY      = "/usr/bin/beegfs-ctl"
DF_BINARY          = "df"

# Special group used to rsync copies of deployed software
# and reference data sets to the various file systems.
DEPLOY_ADMIN_GROUP = "umcg-depad"

# Known sub-groups that share a group folder, but have their own quota.
SUB_GROUPS = [
    "umcg-gonl-rar1",
    "umcg-gonl-rar2",
    "umcg-gonl-rar3",
    "umcg-gonl-rar4",
]

# Private groups have GIDs below this limit, regular groups above.
PRIVATE_GID_LIMIT  = 55100000

# GPFS device name -> logical file system used in reported paths
GPFS_FILESYSTEMS   = { "gpfs2": "tmp02" }

# seconds, None waits forever
COMMAND_TIMEOUT    = None

# Width of the path around the group name in the first column:
# /groups/ + /tmp0* and /mnt/umcgst0*/groups/ + /tmp0* respectively.
GROUPS_PREFIX_WIDTH = 14
MNT_PREFIX_WIDTH    = 27

Config = collections.namedtuple("Config",
                                [
                                    "quota_binary",
                                    "lfs_binary",
                                    "mmlsquota_binary",
                                    "beegfs_binary",
                                    "df_binary",
                                    "deploy_admin_group",
                                    "sub_groups",
                                    "private_gid_limit",
                                    "gpfs_filesystems",
                                    "command_timeout",
                                ])

def default_config():
    """return a Config holding the module defaults"""
    return Config(QUOTA_BINARY,
                  LFS_BINARY,
                  MMLSQUOTA_BINARY,
                  BEEGFS_BINARY,
                  DF_BINARY,
                  DEPLOY_ADMIN_GROUP,
                  list(SUB_GROUPS),
                  PRIVATE_GID_LIMIT,
                  dict(GPFS_FILESYSTEMS),
                  COMMAND_TIMEOUT)

def split_list(value):
    """split a comma separated option into a list of stripped, non-empty
       items"""
    return [v.strip() for v in value.split(",") if v.strip()]

def parse_filesystems(value):
    """parse "device:lfs, device:lfs" into a dict"""
    fs = {}
    for item in split_list(value):
        device, sep, lfs = item.partition(":")
        if not sep or not device.strip() or not lfs.strip():
            raise ConfigError("invalid gpfs_filesystems entry: {0!r}"
                              .format(item))
        fs[device.strip()] = lfs.strip()
    return fs

def load_config(files = None):
    """Read CONFIG_FILES (or files) and return the resulting Config"""
    config = default_config()
    parser = configparser.ConfigParser()
    try:
        parser.read(CONFIG_FILES if files is None else files)
    except configparser.Error as e:
        raise ConfigError("unreadable configuration: {0}".format(e)) from e
    if not parser.has_section("quota"):
        return config

    section = parser["quota"]
    changes = {}
    for key in ("quota_binary", "lfs_binary", "mmlsquota_binary",
                "beegfs_binary", "df_binary", "deploy_admin_group"):
        if key in section:
            changes[key] = section[key].strip()
    if "sub_groups" in section:
        changes["sub_groups"] = split_list(section["sub_groups"])
    if "gpfs_filesystems" in section:
        changes["gpfs_filesystems"] = \
            parse_filesystems(section["gpfs_filesystems"])
    try:
        if "private_gid_limit" in section:
            changes["private_gid_limit"] = \
                section.getint("private_gid_limit")
        if "command_timeout" in section:
            changes["command_timeout"] = \
                section.getfloat("command_timeout")
    except ValueError as e:
        raise ConfigError("invalid number in configuration: {0}"
                          .format(e)) from e
    if changes.get("command_timeout", 1) <= 0:
        raise ConfigError("command_timeout must be positive")

    return config._replace(**changes)

#!/usr/bin/env python3
# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""Lists quota status for the current user and its groups"""

import glob
import logging
import os
import sys
from grp import getgrgid, getgrnam
from optparse import OptionParser
from pwd import getpwuid

from hpcquota import collect
from hpcquota.config import load_config, GROUPS_PREFIX_WIDTH, \
                            MNT_PREFIX_WIDTH
from hpcquota.errors import ConfigError, QuotaError
from hpcquota.record import ReportContext
from hpcquota.report import format_report, label_width

log = logging.getLogger(__name__)

DETAILS = """
Details:

   The report will show 11 columns:

    1 Quota type = one of:
       (U) = user quota
       (P) = (private) group quota: group with only one user and mostly
             used for home dirs.
       (G) = (regular) group quota: group with multiple users.
       (F) = file set quota: different tech to manage quota for a group
             with multiple users.
    2 Path/Filesystem = (part of) a storage system controlled by the
      quota settings listed.
    3 used   = total amount of disk space your data consumes.
    4 quota  = soft limit for space.
    5 limit  = hard limit for space.
    6 grace  = days left before the timer for space quota expires.
    7 used   = total number of files and folders your data consists of.
    8 quota  = the soft limit for the number of files and folders.
    9 limit  = the hard limit for the number of files and folders.
   10 grace  = days left before the timer for the number of files and
               folders quota expires.
   11 status = whether you exceed your quota or not.

   Grace is the time you can temporarily exceed the quota (soft limit) up
   to max the hard limit. When there is no grace time left the soft limit
   will temporarily become a hard limit until the amount of used resources
   drops below the quota, which will reset the timer.
   Grace is 'none'
    * when the quota (soft) limit has not been exceeded or
    * when the quota (soft) limit has been exceeded and there is no grace
      time left or
    * when the hard limit has been exceeded.
   Grace is reported as remaining time when the quota (soft) limit has been
   exceeded, but the hard limit has not been reached yet and the grace
   timer has not yet expired.
   Storage systems that cannot report a soft limit or grace show
   'unknown' and status Unknown.

   Values are always reported with a dot as the decimal separator.
"""

class HelpParser(OptionParser):
    """keep the layout of the epilog"""
    def format_epilog(self, formatter):
        return self.epilog or ""

def group_gid(group):
    """GID of group or None for groups without a group entry"""
    try:
        return getgrnam(group).gr_gid
    except KeyError:
        return None

def member_groups():
    """names of the calling process' groups, GIDs without a group entry
       are left out"""
    groups = []
    for gid in os.getgroups():
        try:
            groups.append(getgrgid(gid).gr_name)
        except KeyError:
            log.debug("no group entry for GID %d", gid)
    return groups

def folder_names(pattern):
    return [os.path.basename(p) for p in glob.glob(pattern)
            if os.path.isdir(p)]

def order_groups(groups, user, admin_group):
    """Remove the private group named after user, sort the remaining
       groups and move admin_group to the top if present"""
    groups = sorted(set(g for g in groups if g and g != user))
    if admin_group in groups:
        groups.remove(admin_group)
        groups.insert(0, admin_group)
    return groups

def quota_groups(user, all_groups, config):
    """return (private groups, groups, first column prefix width)"""
    groups = member_groups()
    private = [user]
    prefix = GROUPS_PREFIX_WIDTH
    if all_groups:
        if os.path.isdir("/groups/"):
            folders = folder_names("/groups/*")
        else:
            folders = folder_names("/mnt/*/groups/*")
            prefix = MNT_PREFIX_WIDTH
        groups += folders + [config.deploy_admin_group] + \
                  list(config.sub_groups)
        homes = folder_names("/mnt/*/home/*") or folder_names("/home/*")
        private = sorted(set(private + homes))
    return private, order_groups(groups, user, config.deploy_admin_group), \
           prefix

def build_report(opts, config):
    """Collect all quota records and return the report lines"""
    user = getpwuid(os.getuid()).pw_name
    if opts.all and user != "root":
        raise ConfigError("Requesting quota info for all groups/users is "
                          "only available to root and you are {0}."
                          .format(user))

    private, groups, prefix = quota_groups(user, opts.all, config)
    report = ReportContext(opts.plain, opts.normalize,
                           label_width(private + groups, prefix))
    mounts = collect.read_mounts()

    blocks = [collect.user_block(user, mounts, config, report)]
    for g in private:
        blocks.append(collect.private_group_block(g, group_gid(g), user,
                                                  mounts, config, report))
    for g in groups:
        blocks.append(collect.group_block(g, group_gid(g), user,
                                          mounts, config, report))
    return format_report(blocks, report)

def main(argv = None):
    parser = HelpParser(usage = "usage: %prog [OPTION]",
                        description = "Lists quota status for the current "
                        "user and its groups (default).",
                        epilog = DETAILS)
    parser.add_option("-a", "--all", action = "store_true", default = False,
                      help = "list quota for all groups instead of only for "
                      "the groups you are a member of (root user only)")
    parser.add_option("-p", "--plain", action = "store_true", default = False,
                      help = "plain text output: disables coloring and other "
                      "formatting using shell escape codes")
    parser.add_option("-n", "--normalize", action = "store_true",
                      default = False,
                      help = "normalize units and always report space in "
                      "tebibytes (T)")
    parser.add_option("-v", "--verbose", action = "store_true",
                      default = False,
                      help = "log skipped mounts and failed quota tools "
                      "to standard error")
    (opts, args) = parser.parse_args(argv)
    if args:
        parser.error("invalid argument {0!r}".format(args[0]))

    logging.basicConfig(level = logging.DEBUG if opts.verbose
                                else logging.WARNING,
                        format = "%(name)s: %(levelname)s: %(message)s")

    try:
        lines = build_report(opts, load_config())
    except QuotaError as e:
        log.error("FATAL: quota reporting FAILED! %s", e)
        return 1

    for l in lines:
        print(l)
    return 0

if __name__ == "__main__":
    sys.exit(main())

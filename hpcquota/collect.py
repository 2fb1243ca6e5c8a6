# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Decide which quota tools to call for an entity and run them.

Lustre, GPFS, BeeGFS and NFS4 file systems are enumerated from the live
mount table, so finding no matching mount is normal and gives no records.
"""

import collections
import logging
import os
import subprocess

from hpcquota import dispatch
from hpcquota.dispatch import Query, BEEGFS, GPFS, LUSTRE, NFS4, PLAIN
from hpcquota.errors import ExternalToolFailure
from hpcquota.lquota import split_subgroup
from hpcquota.record import parse_context, HINT_ADMIN, HINT_PRIVATE, \
                            HINT_REGULAR, HINT_USER, PRIVATE_GROUP, \
                            classify_group

log = logging.getLogger(__name__)

MOUNTS_FILE = "/proc/self/mounts"

Mount = collections.namedtuple("Mount", ["device", "mountpoint", "fstype"])

def read_mounts(mounts_file = MOUNTS_FILE):
    """Read the mount table, return a list of Mount sorted by mount point"""
    m = []
    with open(mounts_file) as f:
        for line in f:
            ls = line.split()
            if len(ls) >= 3:
                m.append(Mount(ls[0], ls[1], ls[2]))
    return sorted(m, key = lambda x: x.mountpoint)

def mounts_of_type(mounts, fstype):
    return [m for m in mounts if m.fstype == fstype]

def subdirs(path):
    """sorted sub-directories of path, empty if path is not a directory"""
    try:
        entries = os.listdir(path)
    except OSError:
        return []
    return sorted(os.path.join(path, e) for e in entries
                  if os.path.isdir(os.path.join(path, e)))

def run_command(argv, timeout = None, check = True):
    """Run a quota tool and return its standard output.  quota exits
       non-zero when a quota is exceeded, pass check = False for it."""
    try:
        proc = subprocess.Popen(argv,
                                stdout = subprocess.PIPE,
                                stderr = subprocess.DEVNULL,
                                universal_newlines = True)
    except OSError as e:
        raise ExternalToolFailure("cannot run {0}: {1}"
                                  .format(argv[0], e)) from e
    try:
        output = proc.communicate(timeout = timeout)[0]
    except UnicodeDecodeError as e:
        proc.kill()
        proc.stdout.close()
        proc.wait()
        raise ExternalToolFailure("{0} printed undecodable output: {1}"
                                  .format(" ".join(argv), e)) from e
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.communicate()
        raise ExternalToolFailure("{0} timed out after {1}s"
                                  .format(" ".join(argv), timeout)) from None
    if check and proc.returncode != 0:
        raise ExternalToolFailure("{0} exited with {1}"
                                  .format(" ".join(argv), proc.returncode))
    if not output.strip():
        raise ExternalToolFailure("{0} printed nothing"
                                  .format(" ".join(argv)))
    return output

def plain_queries(user, config):
    """plain quota tools, only used for the user quota of local and
       NFS file systems"""
    return [Query(user, HINT_USER, PLAIN, None, None,
                  [config.quota_binary, "-sQwA", "-u",
                   "--show-mntpoint", "--hide-device"])]

def lustre_paths(group, hint, mounts, config):
    """Yield (path, hint) to query Lustre quota for group on.  Mounts
       below /mnt/ are complete file systems, anything else is a bind
       mount of a sub folder."""
    admin = hint == HINT_ADMIN
    private = hint == HINT_PRIVATE
    main = split_subgroup(group)[0]
    for m in mounts_of_type(mounts, "lustre"):
        fs = m.mountpoint
        if fs.startswith("/mnt/"):
            if admin:
                if os.path.isdir(os.path.join(fs, "apps")):
                    yield os.path.join(fs, "apps"), hint
                else:
                    for d in subdirs(os.path.join(fs, ".envsync")):
                        yield d, hint
            elif os.path.isdir(os.path.join(fs, "home", group)):
                # private groups only use the home LFS
                yield os.path.join(fs, "home"), HINT_PRIVATE
            elif not private:
                for d in subdirs(os.path.join(fs, "groups", main)):
                    yield d, hint
        elif admin:
            if fs.startswith(("/apps", "/.envsync")):
                yield fs, hint
        elif private:
            if fs.startswith("/home"):
                yield fs, hint
        elif fs.startswith("/groups/{0}/".format(main)):
            yield fs, hint

def lustre_queries(group, hint, gid, mounts, config):
    return [Query(group, h, LUSTRE, path, gid,
                  [config.lfs_binary, "quota", "-q", "-h", "-g", group, path])
            for path, h in lustre_paths(group, hint, mounts, config)]

def gpfs_queries(group, hint, gid, mounts, config):
    """one fileset query per GPFS file system"""
    queries = []
    for m in mounts_of_type(mounts, "gpfs"):
        device = os.path.basename(m.device)
        lfs = config.gpfs_filesystems.get(device)
        if lfs is None:
            log.warning("unknown GPFS file system %s, add it to "
                        "gpfs_filesystems", device)
            continue
        if hint == HINT_ADMIN:
            path = "/.envsync/{0}".format(lfs)
        else:
            path = "/groups/{0}/{1}".format(group, lfs)
        queries.append(Query(group, hint, GPFS, path, gid,
                             [config.mmlsquota_binary, "-j", group, device,
                              "--block-size", "1G"]))
    return queries

def beegfs_queries(entity, hint, gid, mounts, config):
    option = "--uid" if hint == HINT_USER else "--gid"
    return [Query(entity, hint, BEEGFS, m.mountpoint, gid,
                  [config.beegfs_binary, "--getquota", "--csv",
                   "--mount={0}".format(m.mountpoint), option, entity])
            for m in mounts_of_type(mounts, "beegfs")]

def nfs4_queries(entity, hint, gid, mounts, config):
    """NFS4 mounts that are the entity's own home or group folder"""
    if hint in (HINT_USER, HINT_PRIVATE):
        marker = "/home/{0}/".format(entity)
    else:
        marker = "/groups/{0}/".format(split_subgroup(entity)[0])
    queries = []
    for m in mounts_of_type(mounts, "nfs4"):
        mp = m.mountpoint
        if marker in mp.rstrip("/") + "/":
            queries.append(Query(entity, hint, NFS4, mp, gid,
                                 [config.df_binary, "--block-size=1",
                                  "--output=target,size,used,itotal,iused",
                                  mp]))
    return queries

def collect(query, user, report, config, runner = run_command):
    """Run query and parse its output, a failing tool gives no records"""
    try:
        raw_output = runner(query.argv,
                            timeout = config.command_timeout,
                            check = query.backend != PLAIN)
    except ExternalToolFailure as e:
        log.debug("no %s quota for %s: %s", query.backend, query.entity, e)
        return []
    context = parse_context(user,
                            hint = query.hint,
                            path = query.path,
                            gid = query.gid,
                            report = report,
                            private_gid_limit = config.private_gid_limit)
    return dispatch.parse(query.backend, query.entity, raw_output, context)

def collect_all(queries, user, report, config, runner = run_command):
    records = []
    for q in queries:
        records.extend(collect(q, user, report, config, runner))
    return records

def user_block(user, mounts, config, report, runner = run_command):
    """records for the invoking user's own quota"""
    queries = plain_queries(user, config) + \
              beegfs_queries(user, HINT_USER, None, mounts, config)
    return collect_all(queries, user, report, config, runner)

def private_group_block(group, gid, user, mounts, config, report,
                        runner = run_command):
    """records for a private group, mostly backing a home folder"""
    queries = lustre_queries(group, HINT_PRIVATE, gid, mounts, config) + \
              nfs4_queries(group, HINT_PRIVATE, gid, mounts, config)
    return collect_all(queries, user, report, config, runner)

def group_hint(group, gid, user, config):
    if group == config.deploy_admin_group:
        return HINT_ADMIN
    if classify_group(group, gid, user,
                      config.private_gid_limit) == PRIVATE_GROUP:
        return HINT_PRIVATE
    return HINT_REGULAR

def group_block(group, gid, user, mounts, config, report,
                runner = run_command):
    """records for a regular group or the deploy admin group"""
    hint = group_hint(group, gid, user, config)
    queries = lustre_queries(group, hint, gid, mounts, config) + \
              gpfs_queries(group, hint, gid, mounts, config) + \
              beegfs_queries(group, hint, gid, mounts, config) + \
              nfs4_queries(group, hint, gid, mounts, config)
    return collect_all(queries, user, report, config, runner)

import logging

import pytest

from hpcquota import collect
from hpcquota.collect import Mount
from hpcquota.config import default_config
from hpcquota.errors import ExternalToolFailure
from hpcquota.record import ReportContext, HINT_ADMIN, HINT_PRIVATE, \
                            HINT_REGULAR, HINT_USER, USER, REGULAR_GROUP

CONFIG = default_config()
REPORT = ReportContext(True, False, 10)

test_output_mounts = """\
/dev/sda1 / ext4 rw,relatime 0 0
10.0.0.1@tcp:/tmp04 /groups/umcg-gaf/tmp04 lustre rw,flock 0 0
10.0.0.1@tcp:/home /home lustre rw,flock 0 0
/dev/gpfs2 /gpfs2 gpfs rw,relatime 0 0
beegfs_nodev /common beegfs rw,relatime 0 0
isilon:/ifs/prm03 /groups/umcg-gaf/prm03 nfs4 rw,relatime 0 0
"""


@pytest.fixture
def mounts(tmp_path):
    path = tmp_path / "mounts"
    path.write_text(test_output_mounts)
    return collect.read_mounts(str(path))


def fake_runner(outputs):
    """runner returning canned output per binary"""
    def runner(argv, timeout = None, check = True):
        try:
            return outputs[argv[0]]
        except KeyError:
            raise ExternalToolFailure("{0} not found".format(argv[0]))
    return runner


def test_read_mounts(mounts):
    assert mounts[0] == Mount("/dev/sda1", "/", "ext4")
    assert [m.fstype for m in collect.mounts_of_type(mounts, "lustre")] == \
           ["lustre", "lustre"]
    assert [m.mountpoint for m in mounts] == sorted(m.mountpoint
                                                    for m in mounts)


def test_run_command():
    assert collect.run_command(["echo", "hi"]) == "hi\n"
    assert collect.run_command(["sh", "-c", "echo over; exit 1"],
                               check = False) == "over\n"


@pytest.mark.parametrize("argv", [
    ["false"],
    ["true"],
    ["/nonexistent/quota-tool"],
])
def test_run_command_failures(argv):
    with pytest.raises(ExternalToolFailure):
        collect.run_command(argv)


def test_run_command_timeout():
    with pytest.raises(ExternalToolFailure):
        collect.run_command(["sleep", "5"], timeout = 0.1)


def test_run_command_undecodable_output():
    with pytest.raises(ExternalToolFailure):
        collect.run_command(["printf", "\\377\\n"])


def test_lustre_bind_mounts(mounts):
    regular = list(collect.lustre_paths("umcg-gaf", HINT_REGULAR,
                                        mounts, CONFIG))
    assert regular == [("/groups/umcg-gaf/tmp04", HINT_REGULAR)]
    sub = list(collect.lustre_paths("umcg-gaf-rar1", HINT_REGULAR,
                                    mounts, CONFIG))
    assert sub == [("/groups/umcg-gaf/tmp04", HINT_REGULAR)]
    private = list(collect.lustre_paths("alice", HINT_PRIVATE,
                                        mounts, CONFIG))
    assert private == [("/home", HINT_PRIVATE)]
    assert list(collect.lustre_paths("umcg-depad", HINT_ADMIN,
                                     mounts, CONFIG)) == []


def test_lustre_queries(mounts):
    query, = collect.lustre_queries("umcg-gaf", HINT_REGULAR, 55100132,
                                    mounts, CONFIG)
    assert query.argv == ["lfs", "quota", "-q", "-h", "-g", "umcg-gaf",
                          "/groups/umcg-gaf/tmp04"]


def test_gpfs_queries(mounts):
    query, = collect.gpfs_queries("umcg-gaf", HINT_REGULAR, 55100132,
                                  mounts, CONFIG)
    assert query.path == "/groups/umcg-gaf/tmp02"
    assert query.argv[1:] == ["-j", "umcg-gaf", "gpfs2",
                              "--block-size", "1G"]
    admin, = collect.gpfs_queries("umcg-depad", HINT_ADMIN, 55100128,
                                  mounts, CONFIG)
    assert admin.path == "/.envsync/tmp02"


def test_unknown_gpfs_is_skipped(mounts, caplog):
    config = CONFIG._replace(gpfs_filesystems = {})
    with caplog.at_level(logging.WARNING):
        assert collect.gpfs_queries("umcg-gaf", HINT_REGULAR, 55100132,
                                    mounts, config) == []
    assert "gpfs2" in caplog.text


def test_nfs4_queries(mounts):
    query, = collect.nfs4_queries("umcg-gaf", HINT_REGULAR, 55100132,
                                  mounts, CONFIG)
    assert query.path == "/groups/umcg-gaf/prm03"
    assert collect.nfs4_queries("umcg-other", HINT_REGULAR, 55100133,
                                mounts, CONFIG) == []


def test_beegfs_queries(mounts):
    user, = collect.beegfs_queries("alice", HINT_USER, None, mounts, CONFIG)
    assert "--uid" in user.argv
    group, = collect.beegfs_queries("umcg-gaf", HINT_REGULAR, 55100132,
                                    mounts, CONFIG)
    assert "--gid" in group.argv
    assert "--mount=/common" in group.argv


def test_group_hint():
    assert collect.group_hint("umcg-depad", 55100128, "alice", CONFIG) == \
           HINT_ADMIN
    assert collect.group_hint("umcg-gaf", 55100132, "alice", CONFIG) == \
           HINT_REGULAR
    assert collect.group_hint("bob", 50100200, "alice", CONFIG) == \
           HINT_PRIVATE


def test_user_block(mounts):
    runner = fake_runner({
        CONFIG.quota_binary: "/home 356M 1G 2G 7159 0 0\n",
        CONFIG.beegfs_binary: "name,id,size,hard,files,hard\n"
                              "alice,50100123,1024,unlimited,3,unlimited\n",
    })
    records = collect.user_block("alice", mounts, CONFIG, REPORT, runner)
    assert [(r.kind, r.label) for r in records] == [(USER, "/home"),
                                                    (USER, "/common")]


def test_group_block_skips_failing_tools(mounts):
    runner = fake_runner({
        "lfs": "/groups/umcg-gaf/tmp04 1T 15T 20T - 10 0 0 -\n",
    })
    records = collect.group_block("umcg-gaf", 55100132, "alice", mounts,
                                  CONFIG, REPORT, runner)
    assert [(r.kind, r.label) for r in records] == \
           [(REGULAR_GROUP, "/groups/umcg-gaf/tmp04")]

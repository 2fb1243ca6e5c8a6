# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""Backend tag -> parser dispatch"""

import collections

from hpcquota import bquota, gquota, lquota, nquota, pquota
from hpcquota.errors import UnsupportedBackend

PLAIN  = "plain"
LUSTRE = "lustre"
GPFS   = "gpfs"
BEEGFS = "beegfs"
NFS4   = "nfs4"

BACKENDS = collections.OrderedDict([
    (PLAIN,  pquota),
    (LUSTRE, lquota),
    (GPFS,   gquota),
    (BEEGFS, bquota),
    (NFS4,   nquota),
])

# one quota tool invocation for entity on path
Query = collections.namedtuple("Query",
                               [
                                   "entity",
                                   "hint",
                                   "backend",
                                   "path",
                                   "gid",
                                   "argv",
                               ])

def parser_for(backend):
    """return the parse function for backend"""
    try:
        return BACKENDS[backend].parse
    except KeyError:
        raise UnsupportedBackend("unsupported quota backend: {0!r}"
                                 .format(backend)) from None

def parse(backend, entity, raw_output, context):
    """Parse raw_output of backend into a list of resolved QuotaRecords.
       Malformed output gives an empty list."""
    return list(parser_for(backend)(entity, raw_output, context))

# -*- coding: utf-8 -*-
"""
Provides version ranges and version dependent values for protocol
and database schema versions.
"""

from MythAPI.static import LATEST, PROTO_TOKENS, PROTO_VERSION, DB_VERSIONS
from MythAPI.exceptions import MythConfigError

from bisect import bisect_left, bisect_right

def protoToken(version):
    """
    protoToken(version) -> token string or None

    Returns the token sent along with MYTH_PROTO_VERSION, for those
        versions requiring one.
    """
    return PROTO_TOKENS.get(version)

def maxProtoVersion():
    return PROTO_VERSION

def predecessor(version, versions=None):
    """
    predecessor(version, versions=None) -> previous known version or None

    'versions' is an ascending sequence of known versions, defaulting
        to the protocol versions 0 through the newest supported.
    """
    if versions is None:
        versions = range(PROTO_VERSION+1)
    if version == LATEST:
        return versions[-1]
    i = bisect_left(versions, version)
    if i == 0:
        return None
    return versions[i-1]

def successor(version, versions=None):
    """
    successor(version, versions=None) -> next known version or None
    """
    if versions is None:
        versions = range(PROTO_VERSION+1)
    if version == LATEST:
        return None
    i = bisect_right(versions, version)
    if i == len(versions):
        return None
    return versions[i]

def dbPredecessor(version):
    return predecessor(version, DB_VERSIONS)

def dbSuccessor(version):
    return successor(version, DB_VERSIONS)

class VersionRange( object ):
    """
    VersionRange(start=0, end=None) -> range object

    A half-open range [start, end) over protocol or schema versions. An
        'end' of None leaves the range unbounded.  Ranges are immutable,
        and malformed ranges are rejected when declared.
    """
    __slots__ = ('start', 'end')

    def __init__(self, start=0, end=None):
        if (end is not None) and (start > end):
            raise MythConfigError(MythConfigError.CONFIG_RANGE, start, end)
        object.__setattr__(self, 'start', start)
        object.__setattr__(self, 'end', end)

    @classmethod
    def fromTuple(cls, rng, start=0):
        """
        Builds a range from the compact declaration forms
            (), (start,), (start, end), an existing VersionRange, or None.
        """
        if isinstance(rng, cls):
            return rng
        if not rng:
            return cls(start)
        return cls(*rng)

    def __setattr__(self, name, value):
        raise AttributeError("'%s' is immutable" % self.__class__.__name__)

    def isInRange(self, version):
        return (self.start <= version) and \
               ((self.end is None) or (version < self.end))

    def __contains__(self, version):
        return self.isInRange(version)

    def isBounded(self):
        return self.end is not None

    def contains(self, other):
        """True if 'other' lies entirely within this range."""
        if other.start < self.start:
            return False
        if self.end is None:
            return True
        if other.end is None:
            return False
        return other.end <= self.end

    def overlaps(self, other):
        """True if at least one version lies in both ranges."""
        return self.restrict(other) is not None

    def restrict(self, parent):
        """
        VersionRange.restrict(parent) -> VersionRange or None

        Returns the intersection of both ranges, None if they are disjoint.
        """
        start = max(self.start, parent.start)
        if self.end is None:
            end = parent.end
        elif parent.end is None:
            end = self.end
        else:
            end = min(self.end, parent.end)
        if (end is not None) and (end <= start):
            return None
        return self.__class__(start, end)

    def __eq__(self, other):
        if not isinstance(other, VersionRange):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    def __hash__(self):
        return hash((self.start, self.end))

    def __repr__(self):
        return "[%s, %s)" % (self.start,
                             'LATEST' if self.end is None else self.end)

class VersionedValue( object ):
    """
    VersionedValue(*pairs) -> versioned value object

    A raw integer value, which changed across versions. Pairs are given
        as (version, value), with each value valid from its version up to
        the version of the following pair. A single bare integer is
        shorthand for a value which never changed.
    """
    __slots__ = ('pairs', '_single')

    def __init__(self, *pairs, **kwargs):
        name = kwargs.get('name')
        if (len(pairs) == 1) and isinstance(pairs[0], int):
            pairs = ((0, pairs[0]),)
        try:
            pairs = tuple((int(v), int(val)) for v,val in pairs)
        except (TypeError, ValueError):
            raise MythConfigError(MythConfigError.CONFIG_VALUE, name, pairs)
        if len(pairs) == 0:
            raise MythConfigError(MythConfigError.CONFIG_VALUE, name, pairs)
        if list(pairs) != sorted(pairs, key=lambda p: p[0]):
            raise MythConfigError(MythConfigError.CONFIG_VALUE, name, pairs)
        object.__setattr__(self, 'pairs', pairs)
        object.__setattr__(self, '_single', len(pairs) == 1)

    def __setattr__(self, name, value):
        raise AttributeError("'%s' is immutable" % self.__class__.__name__)

    def valueAt(self, version=LATEST):
        """
        VersionedValue.valueAt(version=LATEST) -> int or None

        Returns the raw value valid at 'version', None if the value did
            not exist yet.
        """
        if self._single:
            return self.pairs[0][1]
        if version == LATEST:
            return self.pairs[-1][1]
        for v,val in reversed(self.pairs):
            if v <= version:
                return val
        return None

    @staticmethod
    def enumForValue(catalog, key, version, raw, schemaVersion=None):
        """
        VersionedValue.enumForValue(catalog, key, version, raw,
                    schemaVersion=None) -> constant or None

        Scans the constants of a field set valid at 'version', returning
            the first one resolving to 'raw'.  If 'schemaVersion' is given,
            validity follows FieldCatalog.isSupported(), while values still
            resolve by protocol version.
        """
        for const in catalog.supportedConstants(key, version, schemaVersion):
            if const.value.valueAt(version) == raw:
                return const
        return None

    def __eq__(self, other):
        if not isinstance(other, VersionedValue):
            return NotImplemented
        return self.pairs == other.pairs

    def __hash__(self):
        return hash(self.pairs)

    def __repr__(self):
        if self._single:
            return "<VersionedValue %#x>" % self.pairs[0][1]
        return "<VersionedValue %s>" % \
                ', '.join(['%d:%#x' % p for p in self.pairs])

# -*- coding: utf-8 -*-
"""
Provides field declarations and the catalog resolving which fields are
present, and at which position, for a given protocol or schema version.
"""

from MythAPI.static import RAWTYPE, SPACE
from MythAPI.exceptions import MythConfigError
from MythAPI.logging import MythLog
from MythAPI.versions import VersionRange, VersionedValue

from collections import namedtuple

_UNBOUNDED = VersionRange()

class FieldDescriptor( namedtuple('FieldDescriptor',
                                  'key order name rawtype versions dbversions '
                                  'default column group value') ):
    """
    Immutable description of a single field, or of a single constant of
        an enum or flag table.  'key' and 'order' are filled in when the
        descriptor is bound into a FieldSet.
    """
    __slots__ = ()

    def rangeFor(self, space):
        if space == SPACE.DB:
            return self.dbversions
        return self.versions

    @property
    def attrname(self):
        return self.name.lower()

    def __repr__(self):
        return "<FieldDescriptor '%s.%s'>" % (self.key, self.name)

def Field(name, rawtype=RAWTYPE.STRING, versions=(), dbversions=(),
          default=None, column=None, group=None):
    """
    Field(name, rawtype=STRING, versions=(), dbversions=(), default=None,
                column=None, group=None) -> FieldDescriptor

    'versions' and 'dbversions' accept (), (start,) or (start, end), for
        the protocol and the schema version respectively.
    'group' names the constant table for ENUMGROUP and FLAGGROUP fields.
    """
    if rawtype in (RAWTYPE.ENUMGROUP, RAWTYPE.FLAGGROUP) and group is None:
        raise MythConfigError(MythConfigError.CONFIG_VALUE, name, group)
    return FieldDescriptor(None, None, name, rawtype,
                           VersionRange.fromTuple(versions),
                           VersionRange.fromTuple(dbversions),
                           default, column, group, None)

def Constant(name, *pairs, versions=(), dbversions=()):
    """
    Constant(name, *pairs, versions=(), dbversions=()) -> FieldDescriptor

    Declares one entry of an enum or flag table.  'pairs' are passed on
        to VersionedValue, a bare integer declaring a value which never
        changed.
    """
    return FieldDescriptor(None, None, name, RAWTYPE.INTEGER,
                           VersionRange.fromTuple(versions),
                           VersionRange.fromTuple(dbversions),
                           None, None, None,
                           VersionedValue(*pairs, name=name))

class FieldSet( object ):
    """
    FieldSet(key, fields, space=SPACE.PROTO, register=True) -> FieldSet

    An ordered, immutable collection of fields.  Declaration order is the
        order of the tokens on the wire, or of the columns in a row.
    'space' selects whether fields are filtered by their protocol or by
        their database version range.  Registered field sets are visible
        to every FieldCatalog.
    """
    _declared = {}

    def __init__(self, key, fields, space=SPACE.PROTO, register=True):
        seen = set()
        bound = []
        for i,field in enumerate(fields):
            if field.name in seen:
                raise MythConfigError(MythConfigError.CONFIG_DUPLICATE,
                                      key, field.name)
            seen.add(field.name)
            bound.append(field._replace(key=key, order=i))

        self.key = key
        self.space = space
        self.fields = tuple(bound)

        if register:
            if key in self._declared:
                raise MythConfigError(MythConfigError.CONFIG_DUPLICATE,
                                      key, None)
            self._declared[key] = self

    def __repr__(self):
        return "<FieldSet '%s' (%d fields) at %s>" % \
                (self.key, len(self.fields), hex(id(self)))

    def __iter__(self):
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    def __getattr__(self, name):
        # constant and field access as attributes, eg. ProgramFlags.FL_NONE
        if name.startswith('_'):
            raise AttributeError(name)
        for field in self.__dict__.get('fields', ()):
            if field.name == name:
                return field
        raise AttributeError(name)

    def names(self):
        return [f.name for f in self.fields]

class FieldCatalog( object ):
    """
    FieldCatalog(fieldsets=None, log=None) -> catalog object

    Resolves the fields valid for a field set at a given version.  Results
        are memoized per field set type; the per-version position tables
        are bounded to _MAXVERSIONS entries per type.

    The cache is populated without locking. Population is idempotent, so
        concurrent readers at worst compute an entry twice.

    If 'fieldsets' is None, all registered field set declarations are
        visible.  Otherwise only those provided, and any later passed to
        register().
    """
    logmodule = 'Python Field Catalog'
    _MAXVERSIONS = 128

    class _Entry( object ):
        def __init__(self, fieldset):
            self.fieldset = fieldset
            self.names = dict((f.name, f) for f in fieldset)
            self.tables = {}

    def __init__(self, fieldsets=None, log=None):
        self._declared = fieldsets is None
        self._sets = {}
        self._cache = {}
        self.log = log if log is not None else MythLog(self.logmodule)
        for fieldset in (fieldsets or ()):
            self.register(fieldset)

    def __repr__(self):
        return "<%s (%d cached) at %s>" % \
                (self.__class__.__name__, len(self._cache), hex(id(self)))

    def __contains__(self, key):
        return (key in self._sets) or \
               (self._declared and (key in FieldSet._declared))

    def register(self, fieldset):
        self._sets[fieldset.key] = fieldset
        self._cache.pop(fieldset.key, None)
        return fieldset

    def fieldset(self, key):
        if key in self._sets:
            return self._sets[key]
        if self._declared and (key in FieldSet._declared):
            return FieldSet._declared[key]
        raise MythConfigError(MythConfigError.CONFIG_UNKNOWN, key)

    def _entry(self, key):
        entry = self._cache.get(key)
        if entry is None:
            entry = self._Entry(self.fieldset(key))
            self._cache[key] = entry
        return entry

    def _table(self, key, version, space):
        """
        Returns a tuple of (valid fields, name to position mapping) for
            the field set at the given version.
        """
        entry = self._entry(key)
        if space is None:
            space = entry.fieldset.space
        table = entry.tables.get((space, version))
        if table is None:
            valid = tuple(f for f in entry.fieldset
                                if f.rangeFor(space).isInRange(version))
            table = (valid, dict((f.name, i) for i,f in enumerate(valid)))
            if len(entry.tables) >= self._MAXVERSIONS:
                entry.tables = {}
            entry.tables[(space, version)] = table
        return table

    def allFields(self, key):
        """Returns every declared field, regardless of version."""
        return list(self.fieldset(key))

    def validFields(self, key, version, space=None):
        """
        FieldCatalog.validFields(key, version, space=None) -> list

        Returns the fields valid at 'version', in declaration order.
        """
        return list(self._table(key, version, space)[0])

    def count(self, key, version, space=None):
        return len(self._table(key, version, space)[0])

    def position(self, key, field, version, space=None):
        """
        FieldCatalog.position(key, field, version, space=None) -> int

        Returns the index of 'field' within the fields valid at 'version',
            or -1 if the field is not present at that version.
        """
        if isinstance(field, FieldDescriptor):
            field = field.name
        return self._table(key, version, space)[1].get(field, -1)

    def fieldByPosition(self, key, version, pos, space=None):
        valid = self._table(key, version, space)[0]
        if 0 <= pos < len(valid):
            return valid[pos]
        return None

    def fieldByName(self, key, version, name, space=None):
        """
        FieldCatalog.fieldByName(key, version, name, space=None)
                    -> FieldDescriptor or None

        A field not valid at 'version' is an expected condition; it is
            logged and None returned.
        """
        valid, positions = self._table(key, version, space)
        if name in positions:
            return valid[positions[name]]
        if name in self._entry(key).names:
            self.log(MythLog.GENERAL|MythLog.EXTRA, MythLog.DEBUG,
                     "Field '%s.%s' is not available in version %s" \
                            % (key, name, version))
        else:
            self.log(MythLog.GENERAL, MythLog.WARNING,
                     "Field '%s.%s' is not declared" % (key, name))
        return None

    def isDeclared(self, key, name):
        return name in self._entry(key).names

    def declared(self, key, name):
        """Returns the declared field 'name', regardless of version."""
        return self._entry(key).names.get(name)

    def defaults(self, key, version, space=None):
        """Returns the default tokens of a freshly created record."""
        return [f.default for f in self._table(key, version, space)[0]]

    def columns(self, key, version):
        """Returns the database columns valid at schema 'version'."""
        return [f.column for f in self._table(key, version, SPACE.DB)[0]]

    def supportedConstants(self, key, version, schemaVersion=None):
        """
        Returns the constants of an enum or flag table valid at protocol
            'version', or at 'schemaVersion' if given.
        """
        if schemaVersion is None:
            return self.validFields(key, version, SPACE.PROTO)
        return [c for c in self.allFields(key) \
                        if self.isSupported(c, version, schemaVersion)]

    def isSupported(self, const, version, schemaVersion=None):
        """
        True if the constant 'const' is valid at protocol 'version', or
            for database values, at 'schemaVersion'.  Constants declaring
            no schema range are judged by their protocol range alone.
        """
        if (schemaVersion is None) or (const.dbversions == _UNBOUNDED):
            return const.versions.isInRange(version)
        return const.dbversions.isInRange(schemaVersion)

    def enumForValue(self, key, version, raw, schemaVersion=None):
        return VersionedValue.enumForValue(self, key, version, raw,
                                           schemaVersion)

_catalog = None
def defaultCatalog():
    """
    Returns the process wide catalog of all registered field sets,
        creating it on first use.
    """
    global _catalog
    if _catalog is None:
        _catalog = FieldCatalog()
    return _catalog

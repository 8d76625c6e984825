# -*- coding: utf-8 -*-
"""
Provides the record class, mapping the positional tokens of a protocol
response or database row onto the fields valid at its version.
"""

from MythAPI.static import SPACE, LATEST, SCHEMA_VERSION, BACKEND_SEP, \
                           UTC_PROTO_VERSION, UTC_SCHEMA_VERSION
from MythAPI.exceptions import MythDecodeError, MythDataError
from MythAPI.logging import MythLog
from MythAPI.fields import FieldDescriptor, defaultCatalog
from MythAPI.codec import Codec

from collections import OrderedDict
import weakref

_codecs = weakref.WeakKeyDictionary()
def codecFor(catalog):
    """Returns the shared codec bound to 'catalog'."""
    codec = _codecs.get(catalog)
    if codec is None:
        codec = Codec(catalog)
        _codecs[catalog] = codec
    return codec

class PropertyAwareRecord( object ):
    """
    PropertyAwareRecord(version=LATEST, tokens=None, schemaVersion=None,
                fieldset=None, catalog=None, factory=None) -> record object

    Holds the raw tokens of one response or row.  Values are decoded when
        read, and encoded back into the token list when written.  Fields
        are accessed with get() and set(), by name or descriptor, or as
        lower case attributes:

        >>> prog.get('TITLE') == prog.title
        True

    Subclasses name their field set in '_fieldset', otherwise it must be
        given as 'fieldset'.  'schemaVersion' is given for database rows,
        and selects the fields of database field sets.

    A record has no internal locking, and is not safe for concurrent
        writers.
    """
    logmodule = 'Python Record'
    _fieldset = None
    _localvars = ('version', 'schemaVersion', 'useUTC', 'catalog', 'codec',
                  'factory', 'log', '_key', '_fieldversion', '_tokens')

    def __init__(self, version=LATEST, tokens=None, schemaVersion=None,
                       fieldset=None, catalog=None, factory=None):
        key = fieldset if fieldset is not None else self._fieldset
        if key is None:
            raise MythDataError(MythDataError.DATA_UNSUPPORTED,
                                self.__class__.__name__, '__init__')
        self.catalog = catalog if catalog is not None else defaultCatalog()
        self._key = getattr(key, 'key', key)
        if (self.catalog.fieldset(self._key).space == SPACE.DB) and \
                (schemaVersion is None):
            schemaVersion = SCHEMA_VERSION

        self.version = version
        self.schemaVersion = schemaVersion
        self.factory = factory
        self.codec = codecFor(self.catalog)
        self.log = MythLog(self.logmodule)

        if self.catalog.fieldset(self._key).space == SPACE.DB:
            self._fieldversion = schemaVersion
        else:
            self._fieldversion = version
        if schemaVersion is not None:
            self.useUTC = schemaVersion >= UTC_SCHEMA_VERSION
        else:
            self.useUTC = version >= UTC_PROTO_VERSION

        count = self.catalog.count(self._key, self._fieldversion)
        if tokens is None:
            tokens = [None]*count
        elif len(tokens) != count:
            raise MythDecodeError(MythDecodeError.DECODE_FIELDCOUNT,
                                  self._key, count, len(tokens))
        self._tokens = list(tokens)

    def __repr__(self):
        return "<%s '%s' v%s at %s>" % (self.__class__.__name__,
                        self._key, self._fieldversion, hex(id(self)))

    def __str__(self):
        fields = self._fields()
        fmt = '<%%0%dd>%%s: %%s' % len(str(len(fields)))
        out = []
        for i,field in enumerate(fields):
            try:
                value = self.get(field)
            except MythDecodeError:
                value = self._tokens[i]
            out.append(fmt % (i, field.name, value))
        return ' | '.join(out)

    def __getattr__(self, name):
        if name.startswith('_') or ('catalog' not in self.__dict__):
            raise AttributeError(str(name))
        if not self.catalog.isDeclared(self._key, name.upper()):
            raise AttributeError(str(name))
        return self.get(name.upper())

    def __setattr__(self, name, value):
        if (name in self._localvars) or (name in self.__dict__) or \
                hasattr(self.__class__, name) or \
                ('catalog' not in self.__dict__) or \
                (not self.catalog.isDeclared(self._key, name.upper())):
            object.__setattr__(self, name, value)
        else:
            self.set(name.upper(), value)

    def __eq__(self, other):
        if self.__class__ is not other.__class__:
            return NotImplemented
        if (self.version, self.schemaVersion, self._key) != \
                (other.version, other.schemaVersion, other._key):
            return False
        return self.values() == other.values()

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    __hash__ = None

    @property
    def fieldsetKey(self):
        return self._key

    def _fields(self):
        return self.catalog.validFields(self._key, self._fieldversion)

    def _resolve(self, field):
        """Returns the descriptor and token position of 'field', or -1."""
        if isinstance(field, FieldDescriptor):
            field = field.name
        desc = self.catalog.fieldByName(self._key, self._fieldversion, field)
        if desc is None:
            return None, -1
        return desc, self.catalog.position(self._key, desc,
                                           self._fieldversion)

    def position(self, field):
        return self._resolve(field)[1]

    def has(self, field):
        """True if 'field' is present at this version."""
        if isinstance(field, FieldDescriptor):
            field = field.name
        return self.catalog.position(self._key, field,
                                     self._fieldversion) >= 0

    def _writeback(self, pos):
        ref = weakref.ref(self)
        def callback(value):
            record = ref()
            if record is not None:
                record._tokens[pos] = str(value)
        return callback

    def get(self, field):
        """
        PropertyAwareRecord.get(field) -> typed value or None

        Returns None for fields not present at this version.  Enum and flag
            values write changes back into this record.
        """
        desc, pos = self._resolve(field)
        if pos < 0:
            return None
        return self.codec.decode(desc, self.version, self.schemaVersion,
                                 self.useUTC, self._tokens[pos],
                                 self._writeback(pos))

    def set(self, field, value):
        """
        PropertyAwareRecord.set(field, value) -> None

        Fields not present at this version are ignored.
        """
        desc, pos = self._resolve(field)
        if pos < 0:
            self.log(MythLog.GENERAL|MythLog.EXTRA, MythLog.DEBUG,
                     "Ignoring value for '%s' in '%s'" % \
                            (getattr(field, 'name', field), self._key),
                     'version %s' % self._fieldversion)
            return
        self._tokens[pos] = self.codec.encode(desc, self.version,
                                    self.schemaVersion, self.useUTC, value)

    def getRaw(self, field):
        desc, pos = self._resolve(field)
        if pos < 0:
            return None
        return self._tokens[pos]

    def setRaw(self, field, token):
        desc, pos = self._resolve(field)
        if pos < 0:
            return
        self._tokens[pos] = token

    def clone(self):
        """
        PropertyAwareRecord.clone() -> record object

        Returns a copy of this record, built by the factory registered
            for its field set.
        """
        factory = self.factory
        if factory is None:
            from MythAPI.factory import records as factory
        constructor = factory.constructor(self._key)
        if constructor is None:
            raise MythDataError(MythDataError.DATA_UNSUPPORTED,
                                self.__class__.__name__, 'clone')
        return constructor(self.version, self.schemaVersion,
                           list(self._tokens))

    def keys(self):
        return [f.attrname for f in self._fields()]

    def values(self):
        return [self.get(f) for f in self._fields()]

    def items(self):
        return list(zip(self.keys(), self.values()))

    def __iter__(self):
        return iter(self.keys())

    def __len__(self):
        return len(self._tokens)

    def propertyMap(self):
        return OrderedDict((f.name, self.get(f)) for f in self._fields())

    def toList(self):
        """
        Returns the raw tokens, with unset tokens replaced by their
            declared defaults, or an empty string.
        """
        defaults = self.catalog.defaults(self._key, self._fieldversion)
        out = []
        for token, default in zip(self._tokens, defaults):
            if token is None:
                token = default if default is not None else ''
            out.append(token)
        return out

    def toString(self):
        return BACKEND_SEP.join(self.toList())

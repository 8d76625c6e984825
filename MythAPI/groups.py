# -*- coding: utf-8 -*-
"""
Provides the values of enum and flag typed fields, resolving their named
constants against the protocol version they were received with.
"""

from MythAPI.static import LATEST
from MythAPI.logging import MythLog
from MythAPI.fields import FieldDescriptor, defaultCatalog

from collections import OrderedDict

class Group( object ):
    """
    Group(key, version=LATEST, value=0, schemaVersion=None, catalog=None,
                callback=None) -> group object

    Base of enum and flag values.  'key' names the constant table, and
        'callback', if given, receives the new raw value whenever it
        is changed.  Constants are valid by protocol version, or by
        schema version when 'schemaVersion' is given and the constant
        declares a schema range.  Raw values always resolve by protocol
        version.
    """
    logmodule = 'Python Group'

    def __init__(self, key, version=LATEST, value=0, schemaVersion=None,
                       catalog=None, callback=None):
        self.key = key
        self.version = version
        self.schemaVersion = schemaVersion
        self.catalog = catalog if catalog is not None else defaultCatalog()
        self.callback = callback
        self.value = int(value)

    def __int__(self):
        return self.value

    @property
    def longValue(self):
        return self.value

    def setLongValue(self, value):
        self.value = int(value)
        if self.callback is not None:
            self.callback(self.value)

    def __eq__(self, other):
        if self.__class__ is not other.__class__:
            return NotImplemented
        return (self.key, self.value) == (other.key, other.value)

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    def __hash__(self):
        return hash((self.__class__.__name__, self.key, self.value))

    def __repr__(self):
        return "<%s '%s' %s at %s>" % \
                (self.__class__.__name__, self.key, str(self), hex(id(self)))

    def supported(self):
        """Returns the constants valid at this version."""
        return self.catalog.supportedConstants(self.key, self.version,
                                               self.schemaVersion)

    def _constant(self, const):
        if not isinstance(const, FieldDescriptor):
            const = self.catalog.declared(self.key, const)
        return const

    def _resolve(self, const):
        """
        Returns the raw value of 'const' at this version, None if the
            constant is unknown, or not supported at this version.
        """
        const = self._constant(const)
        if const is None or const.key != self.key:
            return None
        if not self.catalog.isSupported(const, self.version,
                                        self.schemaVersion):
            return None
        return const.value.valueAt(self.version)

class FlagGroup( Group ):
    """
    A bitmask, where any number of its flag constants may be active.
        Flags can be tested and changed as items or attributes.

        >>> prog.programflags.FL_WATCHED
        True
        >>> prog.programflags['FL_WATCHED'] = False
    """

    @classmethod
    def valueOf(cls, key, version, *flags, **kwargs):
        group = cls(key, version, 0, **kwargs)
        for flag in flags:
            group.set(flag)
        return group

    def isSet(self, flag):
        bit = self._resolve(flag)
        if bit is None:
            return False
        return (self.value & bit) != 0

    def set(self, flag):
        """Activates 'flag', returning True if the value changed."""
        bit = self._resolve(flag)
        if bit is None:
            return False
        value = self.value | bit
        if value == self.value:
            return False
        self.setLongValue(value)
        return True

    def clear(self, flag):
        """Deactivates 'flag', returning True if the value changed."""
        bit = self._resolve(flag)
        if bit is None:
            return False
        value = self.value & ~bit
        if value == self.value:
            return False
        self.setLongValue(value)
        return True

    def activeFlags(self):
        return [f for f in self.supported() if self.isSet(f)]

    def inactiveFlags(self):
        return [f for f in self.supported() if not self.isSet(f)]

    def flagMap(self):
        return OrderedDict((f.name, self.isSet(f)) for f in self.supported())

    def __getitem__(self, name):
        if self._constant(name) is None:
            raise KeyError(str(name))
        return self.isSet(name)

    def __setitem__(self, name, value):
        if self._constant(name) is None:
            raise KeyError(str(name))
        if value:
            self.set(name)
        else:
            self.clear(name)

    def __getattr__(self, name):
        if name.startswith('_') or ('catalog' not in self.__dict__):
            raise AttributeError(str(name))
        try:
            return self[name]
        except KeyError:
            raise AttributeError(str(name))

    def __str__(self):
        return '%d=> {%s}' % \
                (self.value, ','.join(f.name for f in self.activeFlags()))

class EnumGroup( Group ):
    """
    A single valued field, where exactly one of its constants is active.
        A value matching no constant at this version is kept, and reported
        through isUnknown(), rather than rejected.
    """

    @classmethod
    def valueOf(cls, key, version, const, **kwargs):
        group = cls(key, version, 0, **kwargs)
        group.setEnum(const)
        return group

    def getEnum(self):
        """Returns the active constant, or None if the value is unknown."""
        return self.catalog.enumForValue(self.key, self.version, self.value,
                                         self.schemaVersion)

    def isUnknown(self):
        return self.getEnum() is None

    def setEnum(self, const):
        """
        Activates 'const', returning True if the value changed.  Constants
            not supported at this version leave the value untouched.
        """
        value = self._resolve(const)
        if value is None:
            MythLog(self.logmodule)(MythLog.GENERAL|MythLog.EXTRA,
                    MythLog.DEBUG, "Constant '%s' not available in '%s'" \
                            % (getattr(const, 'name', const), self.key),
                    'version %s' % self.version)
            return False
        if value == self.value:
            return False
        self.setLongValue(value)
        return True

    def hasEnum(self, *consts):
        active = self.getEnum()
        if active is None:
            return False
        for const in consts:
            const = self._constant(const)
            if (const is not None) and (const.name == active.name):
                return True
        return False

    isSet = hasEnum

    @property
    def name(self):
        active = self.getEnum()
        if active is None:
            return None
        return active.name

    def __str__(self):
        active = self.getEnum()
        if active is None:
            return 'UNKNOWN(%d)' % self.value
        return active.name

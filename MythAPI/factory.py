# -*- coding: utf-8 -*-
"""
Provides the registry building records from protocol responses and
database rows.
"""

from MythAPI.static import LATEST
from MythAPI.exceptions import MythDecodeError, MythDataError
from MythAPI.logging import MythLog
from MythAPI.fields import defaultCatalog

class RecordFactory( object ):
    """
    RecordFactory(catalog=None) -> factory object

    Maps field set keys to construction functions, accepting the arguments
        (version, schemaVersion, tokens).  Record classes are registered
        with the decorator form:

        @records.record('ProgramInfo')
        class Program( PropertyAwareRecord ): ...
    """
    logmodule = 'Python Record Factory'

    def __init__(self, catalog=None):
        self.catalog = catalog if catalog is not None else defaultCatalog()
        self.log = MythLog(self.logmodule)
        self._constructors = {}

    def __repr__(self):
        return "<%s (%d types) at %s>" % (self.__class__.__name__,
                        len(self._constructors), hex(id(self)))

    def __contains__(self, key):
        return key in self._constructors

    def register(self, key, constructor):
        self._constructors[key] = constructor
        return constructor

    def record(self, key):
        """
        Class decorator, registering a record class for 'key', built
            against this factory's catalog.
        """
        def decorator(cls):
            def construct(version, schemaVersion, tokens):
                return cls(version, tokens, schemaVersion,
                           catalog=self.catalog, factory=self)
            self.register(key, construct)
            return cls
        return decorator

    def constructor(self, key):
        return self._constructors.get(key)

    def _build(self, key, version, schemaVersion, tokens, fieldversion):
        constructor = self._constructors.get(key)
        if constructor is None:
            raise MythDataError(MythDataError.DATA_UNSUPPORTED, key,
                                'fromPacket' if schemaVersion is None \
                                             else 'fromRow')
        count = self.catalog.count(key, fieldversion)
        if len(tokens) != count:
            self.log(MythLog.GENERAL, MythLog.ERR,
                     "Field count mismatch for '%s'" % key,
                     'expected %d, found %d at version %s' % \
                            (count, len(tokens), fieldversion))
            raise MythDecodeError(MythDecodeError.DECODE_FIELDCOUNT,
                                  key, count, len(tokens))
        return constructor(version, schemaVersion, list(tokens))

    def fromPacket(self, key, version, tokens):
        """
        RecordFactory.fromPacket(key, version, tokens) -> record object

        Builds a record from the tokens of a protocol response, received
            at the negotiated protocol 'version'.
        """
        return self._build(key, version, None, tokens, version)

    def fromRow(self, key, schemaVersion, tokens, version=LATEST):
        """
        RecordFactory.fromRow(key, schemaVersion, tokens, version=LATEST)
                    -> record object

        Builds a record from the column values of a database row, read
            from a database at 'schemaVersion'.
        """
        return self._build(key, version, schemaVersion, tokens,
                           schemaVersion)

records = RecordFactory()

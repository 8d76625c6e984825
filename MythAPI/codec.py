# -*- coding: utf-8 -*-
"""
Provides conversion between raw protocol and database tokens and their
typed values.
"""

from MythAPI.static import RAWTYPE
from MythAPI.exceptions import MythDecodeError
from MythAPI.logging import MythLog
from MythAPI.groups import EnumGroup, FlagGroup
from MythAPI.fields import defaultCatalog
from MythAPI.utility import datetime

from datetime import date, time, datetime as _pydatetime
import locale
import re

class Codec( object ):
    """
    Codec(catalog=None, log=None) -> codec object

    Decodes raw tokens into typed values, and encodes them back, using
        the type declared for each field.  The catalog is handed on to
        the enum and flag values it creates.

    Date tokens are read as follows:
        digits only         seconds since the epoch, an absolute instant
                            on the protocol and in UTC era rows, or the
                            local wall clock in rows of older schemas
        formatted text      in UTC if 'useUTC' is set, otherwise local
                            time, unless carrying a trailing 'Z'
        0000-00-00...       no value
    """
    logmodule = 'Python Codec'
    _reepoch = re.compile('^-?[0-9]+$')
    _nullday = '0000-00-00'

    def __init__(self, catalog=None, log=None):
        self.catalog = catalog if catalog is not None else defaultCatalog()
        self.log = log if log is not None else MythLog(self.logmodule)
        self._trans = [ self._decodeString,
                        self._decodeInt,
                        self._decodeInt,
                        self._decodeBool,
                        self._decodeFloat,
                        self._decodeDate,
                        self._decodeDay,
                        self._decodeTime,
                        self._decodeEnum,
                        self._decodeFlag]
        self._inv_trans = [ lambda x, *a: str(x),
                            self._encodeInt,
                            self._encodeInt,
                            self._encodeBool,
                            lambda x, *a: locale.format_string('%0.6f', x),
                            self._encodeDate,
                            self._encodeDay,
                            self._encodeTime,
                            self._encodeInt,
                            self._encodeInt]

    def __repr__(self):
        return "<%s at %s>" % (self.__class__.__name__, hex(id(self)))

    def decode(self, field, version, schemaVersion, useUTC, token,
                     callback=None):
        """
        Codec.decode(field, version, schemaVersion, useUTC, token,
                    callback=None) -> typed value or None

        'schemaVersion' is None for tokens received over the protocol.
        'callback' is attached to enum and flag values, receiving their
            raw value whenever they are changed.
        """
        rawtype = field.rawtype
        if (token is None) or ((token == '') and (rawtype != RAWTYPE.STRING)):
            if field.default is not None:
                token = field.default
            elif rawtype == RAWTYPE.BOOLEAN:
                return False
            else:
                return None
            if (token == '') and (rawtype != RAWTYPE.STRING):
                return None

        try:
            return self._trans[rawtype](token, version, schemaVersion,
                                        useUTC, field, callback)
        except (TypeError, ValueError, OverflowError, OSError):
            raise MythDecodeError(MythDecodeError.DECODE_VALUE,
                                  field.name, token, rawtype)

    def encode(self, field, version, schemaVersion, useUTC, value):
        """
        Codec.encode(field, version, schemaVersion, useUTC, value) -> token

        None encodes to the declared default of the field, or to the empty
            string, the representation of an absent value.
        """
        if value is None:
            if field.default is not None:
                return field.default
            return ''

        rawtype = field.rawtype
        try:
            return self._inv_trans[rawtype](value, version, schemaVersion,
                                            useUTC)
        except (TypeError, ValueError, OverflowError, AttributeError):
            raise MythDecodeError(MythDecodeError.ENCODE_VALUE,
                                  field.name, value, rawtype)

    @staticmethod
    def decodeLong(high, low):
        """
        Codec.decodeLong(high, low) -> int

        Rebuilds a 64 bit value sent as two signed 32 bit halves.
        """
        return (int(high) << 32) | (int(low) & 0xffffffff)

    @staticmethod
    def encodeLong(value):
        """
        Codec.encodeLong(value) -> (high, low)

        Splits a 64 bit value into two signed 32 bit halves.
        """
        def signed(v):
            v &= 0xffffffff
            return v - 0x100000000 if v & 0x80000000 else v
        value = int(value)
        return (str(signed(value >> 32)), str(signed(value)))

    def _decodeString(self, token, *args):
        return token

    def _decodeInt(self, token, *args):
        return int(token)

    def _decodeFloat(self, token, *args):
        return locale.atof(token)

    def _decodeBool(self, token, *args):
        return token.lower() in ('1', 'true')

    def _decodeDate(self, token, version, schemaVersion, useUTC, *args):
        if token.startswith(self._nullday):
            return None
        if self._reepoch.match(token):
            if (schemaVersion is None) or useUTC:
                dt = datetime.fromtimestamp(int(token), datetime.UTCTZ())
            else:
                dt = datetime.fromwalltimestamp(int(token))
        else:
            tz = 'UTC' if useUTC else None
            dt = datetime.fromIso(token, tz=tz)
        return dt.astimezone(datetime.localTZ())

    def _decodeDay(self, token, *args):
        if token.startswith(self._nullday):
            return None
        return _pydatetime.strptime(token[:10], '%Y-%m-%d').date()

    def _decodeTime(self, token, *args):
        return time(*[int(x) for x in token.split(':')])

    def _decodeEnum(self, token, version, schemaVersion, useUTC,
                          field, callback):
        return EnumGroup(field.group, version, int(token), schemaVersion,
                         self.catalog, callback)

    def _decodeFlag(self, token, version, schemaVersion, useUTC,
                          field, callback):
        return FlagGroup(field.group, version, int(token), schemaVersion,
                         self.catalog, callback)

    def _encodeInt(self, value, *args):
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(value)
        return str(int(value))

    def _encodeBool(self, value, *args):
        # integers 0 and 1 as stored in tinyint columns
        if isinstance(value, bool) or (value in (0, 1) and \
                isinstance(value, int)):
            return '1' if value else '0'
        raise TypeError(value)

    def _encodeDate(self, value, version, schemaVersion, useUTC):
        value = datetime.duck(value)
        if schemaVersion is None:
            return str(int(value.timestamp()))
        if useUTC:
            return value.sqlformat(datetime.UTCTZ())
        return value.sqlformat()

    def _encodeDay(self, value, *args):
        if isinstance(value, _pydatetime):
            value = value.date()
        if not isinstance(value, date):
            raise TypeError(value)
        return value.isoformat()

    def _encodeTime(self, value, *args):
        if not isinstance(value, time):
            raise TypeError(value)
        return value.strftime('%H:%M:%S')

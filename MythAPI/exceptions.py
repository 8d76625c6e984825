# -*- coding: utf-8 -*-
"""Provides custom error codes"""

from MythAPI.static import ERRCODES, RAWTYPE

class MythError( Exception, ERRCODES ):
    """
    MythError('Generic Error Message')
    MythError(SOCKET, socketcode, socketerr)

    Error string will be available as obj.args[0].  Additional attributes
        may be available depending on the error code.
    """
    ecode = None

    def __init__(self, *args):
        if args[0] == self.SOCKET:
            self.ename = 'SOCKET'
            self.ecode, (self.sockcode, self.sockerr) = args
            self.args = ("Socket Error: %s" %self.sockerr,)
        elif self.ecode is None:
            self.ename = 'GENERIC'
            self.ecode = self.GENERIC
            self.args = args
        self.message = str(self.args[0])

class MythConfigError( MythError ):
    """
    MythConfigError('Generic Error Message')
    MythConfigError(CONFIG_RANGE, start, end)
    MythConfigError(CONFIG_DUPLICATE, fieldset, name)
    MythConfigError(CONFIG_VALUE, name, pairs)
    MythConfigError(CONFIG_UNKNOWN, fieldset)

    Raised while field declarations are being built. These indicate an
        error in the declarations themselves and are not recoverable.
    """
    def __init__(self, *args):
        if args[0] == self.CONFIG_RANGE:
            self.ename = 'CONFIG_RANGE'
            self.ecode, self.start, self.end = args
            self.args = ("Invalid version range: %s is after %s" \
                            % (self.start, self.end),)
        elif args[0] == self.CONFIG_DUPLICATE:
            self.ename = 'CONFIG_DUPLICATE'
            self.ecode, self.fieldset, self.name = args
            if self.name is None:
                self.args = ("Field set '%s' declared twice" \
                                % self.fieldset,)
            else:
                self.args = ("Field '%s' declared twice in '%s'" \
                                % (self.name, self.fieldset),)
        elif args[0] == self.CONFIG_VALUE:
            self.ename = 'CONFIG_VALUE'
            self.ecode, self.name, self.pairs = args
            self.args = ("Invalid versioned value for '%s': %s" \
                            % (self.name, self.pairs),)
        elif args[0] == self.CONFIG_UNKNOWN:
            self.ename = 'CONFIG_UNKNOWN'
            self.ecode, self.fieldset = args
            self.args = ("Unknown field set '%s'" % self.fieldset,)
        MythError.__init__(self, *args)

class MythDecodeError( MythError ):
    """
    MythDecodeError('Generic Error Message')
    MythDecodeError(DECODE_FIELDCOUNT, fieldset, expected, found)
    MythDecodeError(DECODE_VALUE, field, token, rawtype)
    MythDecodeError(ENCODE_VALUE, field, value, rawtype)

    Error string will be available as obj.args[0].  Additional attributes
        may be available depending on the error code.
    """
    def __init__(self, *args):
        if args[0] == self.DECODE_FIELDCOUNT:
            self.ename = 'DECODE_FIELDCOUNT'
            self.ecode, self.fieldset, self.expected, self.found = args
            self.args = ("%d args expected but %d args found for '%s'" \
                            % (self.expected, self.found, self.fieldset),)
        elif args[0] == self.DECODE_VALUE:
            self.ename = 'DECODE_VALUE'
            self.ecode, self.field, self.token, self.rawtype = args
            self.args = ("Cannot decode '%s' for field '%s' as %s" \
                            % (self.token, self.field,
                               RAWTYPE._names[self.rawtype]),)
        elif args[0] == self.ENCODE_VALUE:
            self.ename = 'ENCODE_VALUE'
            self.ecode, self.field, self.value, self.rawtype = args
            self.args = ("Cannot encode %r for field '%s' as %s" \
                            % (self.value, self.field,
                               RAWTYPE._names[self.rawtype]),)
        MythError.__init__(self, *args)

class MythDataError( MythError ):
    """
    MythDataError('Generic Error Message')
    MythDataError(DATA_UNSUPPORTED, cls, operation)
    """
    def __init__(self, *args):
        if args[0] == self.DATA_UNSUPPORTED:
            self.ename = 'DATA_UNSUPPORTED'
            self.ecode, self.cls, self.operation = args
            self.args = ("'%s' does not support %s()" \
                            % (self.cls, self.operation),)
        MythError.__init__(self, *args)

class MythDBError( MythError ):
    """
    MythDBError('Generic Error Message')
    MythDBError(DB_RAW, sqlerr)
    MythDBError(DB_CONNECTION, dbconn)
    MythDBError(DB_CREDENTIALS)
    MythDBError(DB_SETTING, setting, hostname)

    Error string will be available as obj.args[0].  Additional attributes
        may be available depending on the error code.
    """
    def __init__(self, *args):
        if args[0] == self.DB_RAW:
            self.ename = 'DB_RAW'
            self.ecode, sqlerr = args
            if len(sqlerr) == 1:
                self.sqlcode = 0
                self.sqlerr = sqlerr[0]
                self.args = ("MySQL error: %s" % self.sqlerr,)
            else:
                self.sqlcode, self.sqlerr = sqlerr[:2]
                self.args = ("MySQL error %d: %s" % (self.sqlcode, self.sqlerr),)
        elif args[0] == self.DB_CONNECTION:
            self.ename = 'DB_CONNECTION'
            self.ecode, self.dbconn = args
            self.args = ("Failed to connect to database at '%s'@'%s' " \
                   % (self.dbconn.database, self.dbconn.hostname) \
                            +"for user '%s'." % self.dbconn.username,)
        elif args[0] == self.DB_CREDENTIALS:
            self.ename = 'DB_CREDENTIALS'
            self.ecode = args[0]
            self.args = ("Could not find database login credentials",)
        elif args[0] == self.DB_SETTING:
            self.ename = 'DB_SETTING'
            self.ecode, self.setting, self.hostname = args
            self.args = ("Could not find setting '%s' on host '%s'" \
                            % (self.setting, self.hostname),)
        MythError.__init__(self, *args)

class MythBEError( MythError ):
    """
    MythBEError('Generic Error Message')
    MythBEError(PROTO_CONNECTION, backend, port)
    MythBEError(PROTO_ANNOUNCE, backend, port, response)
    MythBEError(PROTO_MISMATCH, remote, local)

    Error string will be available as obj.args[0].  Additional attributes
        may be available depending on the error code.
    """
    def __init__(self, *args):
        if args[0] == self.PROTO_CONNECTION:
            self.ename = 'PROTO_CONNECTION'
            self.ecode, self.backend, self.port = args
            self.args = ("Failed to connect to backend at %s:%d" % \
                        (self.backend, self.port),)
        elif args[0] == self.PROTO_ANNOUNCE:
            self.ename = 'PROTO_ANNOUNCE'
            self.ecode, self.backend, self.port, self.response = args
            self.args = ("Unexpected response to ANN on %s:%d - %s" \
                            % (self.backend, self.port, self.response),)
        elif args[0] == self.PROTO_MISMATCH:
            self.ename = 'PROTO_MISMATCH'
            self.ecode, self.remote, self.local = args
            self.args = ("Backend speaks version %s, we speak version %s" % \
                        (self.remote, self.local),)
        MythError.__init__(self, *args)

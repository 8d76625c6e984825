# -*- coding: utf-8 -*-
"""Provides the backend socket and assorted helper classes"""

from MythAPI.static import BACKEND_SEP
from MythAPI.logging import MythLog
from MythAPI.exceptions import MythError

from io import BytesIO
from select import select
from time import time
import socket

class deadlinesocket( socket.socket ):
    """
    Customized socket providing logging, and the length-prefixed framing
        used by the backend protocol, guaranteeing termination after
        a set timeout.
    """
    def __init__(self, *args, **kwargs):
        socket.socket.__init__(self, *args, **kwargs)
        self.log = MythLog('Python Socket')
        self.setdeadline(10.0)

    def connect(self, *args, **kwargs):
        self.settimeout(self.getdeadline())
        socket.socket.connect(self, *args, **kwargs)
        self.setblocking(0)

    def getdeadline(self): return self._deadline
    def setdeadline(self, deadline): self._deadline = deadline

    def dlrecv(self, bufsize, flags=0, deadline=None):
        # pull default timeout
        if deadline is None:
            deadline = self._deadline
        if deadline < 1000:
            deadline += time()

        buff = BytesIO()
        # loop until necessary data has been received
        while bufsize > buff.tell():
            # wait for data on the socket
            t = time()
            timeout = (deadline-t) if (deadline-t>0) else 0.0
            if len(select([self],[],[], timeout)[0]) == 0:
                # deadline reached, terminate
                return b''

            # append response to buffer
            p = buff.tell()
            try:
                buff.write(self.recv(bufsize-buff.tell(), flags))
            except socket.error as e:
                raise MythError(MythError.SOCKET, e.args)
            if buff.tell() == p:
                # no data read from a 'ready' socket, connection terminated
                raise MythError(MythError.SOCKET,
                                (54, 'Connection reset by peer'))

            if timeout == 0:
                break
        return buff.getvalue()

    def recvheader(self, flags=0, deadline=None):
        """
        Loop recv listening for an amount of data provided
            in the first 8 bytes.
        """
        header = self.dlrecv(8, flags, deadline)
        try:
            size = int(header)
        except ValueError:
            raise MythError(MythError.SOCKET,
                            (0, 'Invalid length header %r' % header))
        data = self.dlrecv(size, flags, deadline)
        if len(data) < size:
            raise MythError(MythError.SOCKET,
                            (0, 'Short read, %d of %d bytes' \
                                    % (len(data), size)))
        data = data.decode('utf-8')
        self.log(MythLog.SOCKET|MythLog.NETWORK, MythLog.DEBUG, \
                            'read <-- %d' % size, data)
        return data

    def sendheader(self, data, flags=0):
        """Send data, prepending the length in the first 8 bytes."""
        try:
            body = data.encode('utf-8')
            self.log(MythLog.SOCKET|MythLog.NETWORK, MythLog.DEBUG, \
                                'write --> %d' % len(body), data)
            self.sendall(('%-8d' % len(body)).encode('ascii') + body, flags)
        except socket.error as e:
            raise MythError(MythError.SOCKET, e.args)

    def sendtokens(self, tokens, flags=0):
        """Send a list of tokens as a single message."""
        self.sendheader(BACKEND_SEP.join(str(t) for t in tokens), flags)

    def recvtokens(self, flags=0, deadline=None):
        """Receive a single message, split into its tokens."""
        return self.recvheader(flags, deadline).split(BACKEND_SEP)

def check_ipv6(n):
    try:
        socket.inet_pton(socket.AF_INET6, n)
        return True
    except socket.error:
        return False

class QuickProperty( object ):
    """
    Data descriptor holding its value in a masked instance variable,
        passing assignments through an optional handler.  Values the
        handler rejects are ignored, keeping the previous value.
    """
    def __init__(self, maskedvar, default=None, handler=None):
        self.varname = maskedvar
        self.default = default
        if handler is None:
            handler = lambda x: x
        self.handler = handler

    def __get__(self, inst, owner):
        if inst is None:
            return self
        if hasattr(inst, self.varname):
            return getattr(inst, self.varname)
        return self.default

    def __set__(self, inst, value):
        try:
            value = self.handler(value)
        except (TypeError, ValueError):
            pass
        else:
            setattr(inst, self.varname, value)

    def __call__(self, handler):
        self.handler = handler
        return self

    def isDefault(self, inst):
        if hasattr(inst, self.varname):
            return False
        return True

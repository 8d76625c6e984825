#------------------------------
# MythAPI/utility/dt.py
# Description: Provides timezone aware datetimes, with import and
#              export of the timestamp formats used by the backend
#              protocol and database
#------------------------------

from datetime import datetime as _pydatetime, \
                     tzinfo as _pytzinfo, \
                     timedelta
from zoneinfo import ZoneInfo
import os
import re
import time

class offsettzinfo( _pytzinfo ):
    """Customized timezone class that provides a simple static offset."""
    @classmethod
    def local(cls):
        return cls(sec=-time.timezone)
    def __init__(self, direc='+', hr=0, min=0, sec=0):
        sec = int(sec) + 60 * (int(min) + 60 * int(hr))
        if direc == '-':
            sec = -1*sec
        self._offset = timedelta(seconds=sec)
    def utcoffset(self, dt): return self._offset
    def tzname(self, dt): return ''
    def dst(self, dt): return timedelta(0)
    def __repr__(self):
        return "<offsettzinfo %s>" % self._offset

class datetime( _pydatetime ):
    """
    Customized datetime class, always carrying a timezone, offering canned
    import and export of several common time formats, and 'duck' importing
    between them.
    """
    _reiso = re.compile(r'(?P<year>[0-9]{4})'
                       r'-(?P<month>[0-9]{1,2})'
                       r'-(?P<day>[0-9]{1,2})'
                        r'.'
                        r'(?P<hour>[0-9]{2})'
                       r':(?P<min>[0-9]{2})'
                       r'(:(?P<sec>[0-9]{2}))?'
                       r'(\.(?P<frac>[0-9]{1,6}))?'
                        r'( )?(?P<tz>Z|'
                            r'(?P<tzdirec>[-+])'
                            r'(?P<tzhour>[0-9]{1,2})'
                            r'(:)?'
                            r'(?P<tzmin>[0-9]{2})?'
                        r')?$')
    _localtz = None
    _utctz = None

    @classmethod
    def localTZ(cls):
        if cls._localtz is None:
            try:
                if os.getenv('TZ'):
                    cls._localtz = ZoneInfo(os.getenv('TZ'))
                elif os.path.exists('/usr/share/zoneinfo/localtime'):
                    cls._localtz = ZoneInfo('localtime')
                else:
                    with open('/etc/localtime', 'rb') as zfile:
                        cls._localtz = ZoneInfo.from_file(zfile, 'localtime')
            except (OSError, ValueError, KeyError):
                cls._localtz = offsettzinfo.local()
        return cls._localtz

    @classmethod
    def UTCTZ(cls):
        if cls._utctz is None:
            try:
                cls._utctz = ZoneInfo('Etc/UTC')
            except (OSError, ValueError, KeyError):
                cls._utctz = offsettzinfo()
        return cls._utctz

    @classmethod
    def fromDatetime(cls, dt, tzinfo=None, fold=None):
        if tzinfo is None:
            tzinfo = dt.tzinfo
            fold = dt.fold
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute,
                   dt.second, dt.microsecond, tzinfo, fold)

# override existing classmethods to enforce use of timezone
    @classmethod
    def now(cls, tz=None):
        if tz is None:
            tz = cls.localTZ()
        obj = super(datetime, cls).now(tz)
        return cls.fromDatetime(obj)

    @classmethod
    def fromtimestamp(cls, timestamp, tz=None):
        if tz is None:
            tz = cls.localTZ()
        obj = super(datetime, cls).fromtimestamp(float(timestamp), tz)
        return cls.fromDatetime(obj)

    @classmethod
    def strptime(cls, datestring, format, tzinfo=None):
        obj = super(datetime, cls).strptime(datestring, format)
        return cls.fromDatetime(obj, tzinfo)

# new class methods for interfacing with MythTV
    @classmethod
    def fromwalltimestamp(cls, timestamp, tz=None):
        """
        Interprets a count of seconds since 1970-01-01 00:00 as a wall
            clock reading in 'tz', rather than as an absolute instant.
        """
        if tz is None:
            tz = cls.localTZ()
        wall = _pydatetime(1970, 1, 1) + timedelta(seconds=int(timestamp))
        return cls.fromDatetime(wall, tz)

    @classmethod
    def frommythtime(cls, mtime, tz=None):
        if tz in ('UTC', 'Etc/UTC'):
            tz = cls.UTCTZ()
        elif tz is None:
            tz = cls.localTZ()
        return cls.strptime(str(mtime), '%Y%m%d%H%M%S', tz)

    @classmethod
    def fromIso(cls, isotime, sep='T', tz=None):
        match = cls._reiso.match(isotime)
        if match is None:
            raise TypeError("time data '{0}' does not match ISO 8601 format" \
                                .format(isotime))

        dt = [int(a) for a in match.group('year', 'month', 'day',
                                           'hour', 'min')]
        if match.group('sec') is not None:
            dt.append(int(match.group('sec')))
        else:
            dt.append(0)

        # microseconds
        if match.group('frac') is not None:
            dt.append(int(match.group('frac').ljust(6, '0')))
        else:
            dt.append(0)

        if match.group('tz'):
            if match.group('tz') == 'Z':
                tz = cls.UTCTZ()
            elif match.group('tzmin'):
                tz = offsettzinfo(*match.group('tzdirec','tzhour','tzmin'))
            else:
                tz = offsettzinfo(*match.group('tzdirec','tzhour'))
        elif tz in ('UTC', 'Etc/UTC'):
            tz = cls.UTCTZ()
        elif tz is None:
            tz = cls.localTZ()
        dt.append(tz)

        return cls(*dt)

    @classmethod
    def duck(cls, t):
        if isinstance(t, cls):
            # existing modified datetime
            return t
        if isinstance(t, _pydatetime):
            # existing built-in datetime
            return cls.fromDatetime(t)
        for func in [cls.fromtimestamp, #epoch time
                     cls.frommythtime, #iso time with integer characters only
                     cls.fromIso]: #iso 8601 time
            try:
                return func(t)
            except (TypeError, ValueError, OverflowError):
                pass
        raise TypeError("time data '%s' does not match supported formats"%t)

    def __new__(cls, year, month, day, hour=None, minute=None, second=None,
                      microsecond=None, tzinfo=None, fold=None):

        if tzinfo is None:
            kwargs = {'tzinfo':cls.localTZ()}
        else:
            kwargs = {'tzinfo':tzinfo}
        if hour is not None:
            kwargs['hour'] = hour
        if minute is not None:
            kwargs['minute'] = minute
        if second is not None:
            kwargs['second'] = second
        if microsecond is not None:
            kwargs['microsecond'] = microsecond
        if fold is not None:
            kwargs['fold'] = fold
        return _pydatetime.__new__(cls, year, month, day, **kwargs)

    def mythformat(self):
        return self.astimezone(self.UTCTZ()).strftime('%Y%m%d%H%M%S')

    def sqlformat(self, tz=None):
        """Formats as a database DATETIME, in 'tz' or local time."""
        if tz is None:
            tz = self.localTZ()
        return self.astimezone(tz).strftime('%Y-%m-%d %H:%M:%S')

    def astimezone(self, tz):
        return self.fromDatetime(super(datetime, self).astimezone(tz))

    def asnaiveutc(self):
        return self.astimezone(self.UTCTZ()).replace(tzinfo=None)

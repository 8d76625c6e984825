"""
Shared fixtures for the MythAPI tests.

Provides:
- a pinned local timezone, so date decoding is host independent
- a captured log buffer
- a small catalog of toy field sets, independent of the declared ones
"""

import io

import pytest

from MythAPI.static import RAWTYPE, SPACE
from MythAPI.logging import MythLog
from MythAPI.utility import datetime, offsettzinfo
from MythAPI.fields import Field, Constant, FieldSet, FieldCatalog
from MythAPI.factory import RecordFactory


@pytest.fixture(autouse=True)
def localtz():
    """Pins the local timezone to a fixed UTC+2 offset."""
    saved = datetime._localtz
    datetime._localtz = offsettzinfo('+', 2)
    yield datetime._localtz
    datetime._localtz = saved


@pytest.fixture
def logbuffer():
    """Redirects all log output, at every level and mask, into a buffer."""
    MythLog._initlogger()
    saved = (MythLog._LOGFILE, MythLog._LEVEL, MythLog._MASK)
    buff = io.StringIO()
    MythLog._setfileobject(buff, close=False)
    MythLog._LEVEL = MythLog.DEBUG
    MythLog._MASK = MythLog.ALL
    yield buff
    MythLog._setfileobject(saved[0], close=False)
    MythLog._LEVEL, MythLog._MASK = saved[1:]


@pytest.fixture
def toysets():
    modes = FieldSet('ToyMode', [
        Constant('OFF',     0),
        Constant('ON',      1),
        Constant('TURBO',   2, versions=(8,))], register=False)
    flags = FieldSet('ToyFlags', [
        Constant('RED',     0x1),
        Constant('BLUE',    0x2),
        Constant('GREEN',   (0, 0x4), (12, 0x8))], register=False)
    toy = FieldSet('Toy', [
        Field('TITLE'),
        Field('TOTAL',      RAWTYPE.INTEGER, default='0'),
        Field('LATE',       RAWTYPE.INTEGER, versions=(10,)),
        Field('GONE',       RAWTYPE.STRING, versions=(0, 10)),
        Field('ACTIVE',     RAWTYPE.BOOLEAN),
        Field('WHEN',       RAWTYPE.DATE),
        Field('MODE',       RAWTYPE.ENUMGROUP, group='ToyMode'),
        Field('FLAGS',      RAWTYPE.FLAGGROUP, group='ToyFlags',
                            default='0')], register=False)
    row = FieldSet('toyrow', [
        Field('ID',         RAWTYPE.INTEGER, column='id'),
        Field('STAMP',      RAWTYPE.DATE, column='stamp'),
        Field('NOTE',       RAWTYPE.STRING, column='note', default='',
                            dbversions=(1300,))], space=SPACE.DB,
                            register=False)
    return [toy, modes, flags, row]


@pytest.fixture
def catalog(toysets):
    return FieldCatalog(toysets)


@pytest.fixture
def factory(catalog):
    return RecordFactory(catalog)

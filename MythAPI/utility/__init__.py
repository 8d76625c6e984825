from MythAPI.utility.dt import datetime, offsettzinfo

from MythAPI.utility.other import deadlinesocket, check_ipv6, QuickProperty

"""Time and memory units, in SI."""

second = 1.0
minute = 60 * second
hour = 60 * minute
day = 24 * hour

GiB = 1024**3


def prettytime(t):
    """Format a duration in seconds with a sensible unit."""
    if t == 0:
        return "0 seconds"
    s = abs(t)
    if s < 1e-3:
        value, units = t / 1e-6, "μs"
    elif s < 1:
        value, units = t / 1e-3, "ms"
    elif s < minute:
        value, units = t, "seconds"
    elif s < hour:
        value, units = t / minute, "minutes"
    elif s < day:
        value, units = t / hour, "hours"
    else:
        value, units = t / day, "days"
    return "%.3f %s" % (value, units)

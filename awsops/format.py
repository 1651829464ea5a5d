import datetime
import math
import awsops
from tabulate import tabulate

_units = ['B', 'KB', 'MB', 'GB', 'TB']

def table(headers, rows):
    return tabulate(rows, headers, tablefmt='simple', disable_numparse=True)

def truncate(text, size):
    if len(text) <= size:
        return text
    return text[:size - 3] + '...'

def filesize(size):
    size = float(size)
    for unit in _units:
        if size < 1024 or unit == _units[-1]:
            break
        size /= 1024
    if unit == 'B':
        return f'{int(size)} B'
    return f'{size:.1f}'.rstrip('0').rstrip('.') + f' {unit}'

def parse_time(value):
    if isinstance(value, datetime.datetime):
        return value if value.tzinfo else value.replace(tzinfo=datetime.timezone.utc)
    # lambda returns LastModified as 2019-01-01T00:00:00.000+0000
    return datetime.datetime.strptime(value, '%Y-%m-%dT%H:%M:%S.%f%z')

def ago(value, now=None):
    """
    Relative description of a past time, e.g. "3 days ago". Each unit is
    rounded half up and the first threshold that holds picks the wording,
    so 50 minutes reads "an hour ago" and 29 days "a month ago".
    """
    seconds = ((now or awsops.now()) - parse_time(value)).total_seconds()
    days = seconds / (24 * 60 * 60)
    months = days * 4800 / 146097
    if _round(seconds) < 45:
        return 'a few seconds ago'
    for count, unit, limit in [(_round(seconds / 60), 'minute', 45),
                               (_round(seconds / (60 * 60)), 'hour', 22),
                               (_round(days), 'day', 26),
                               (_round(months), 'month', 11),
                               (_round(months / 12), 'year', None)]:
        if count <= 1:
            return f'an {unit} ago' if unit == 'hour' else f'a {unit} ago'
        if limit is None or count < limit:
            return f'{count} {unit}s ago'

def _round(value):
    return math.floor(value + .5)

def cost(value):
    return '-' if not value else f'{value:.10f}'

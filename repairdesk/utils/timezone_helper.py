# repairdesk/utils/timezone_helper.py
"""
Shop timezone helper functions

Timestamps are stored as naive UTC and only converted for display.
"""
from datetime import datetime
import pytz
from flask import current_app


def get_shop_timezone():
    name = current_app.config.get('SHOP_TIMEZONE', 'UTC')
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        current_app.logger.warning(f'Unknown SHOP_TIMEZONE {name!r}, using UTC')
        return pytz.utc


def utc_to_local(utc_dt):
    """Convert UTC datetime to shop time"""
    if utc_dt is None:
        return None

    if utc_dt.tzinfo is None:
        # Assume UTC if no timezone info
        utc_dt = pytz.utc.localize(utc_dt)

    return utc_dt.astimezone(get_shop_timezone())


def format_local_datetime(dt, format_str='%b %d, %Y %H:%M'):
    if dt is None:
        return 'N/A'
    return utc_to_local(dt).strftime(format_str)


def format_local_date(dt, format_str='%b %d, %Y'):
    if dt is None:
        return 'N/A'
    return utc_to_local(dt).strftime(format_str)


def time_ago(value, now=None):
    """Format datetime as time ago"""
    if not value:
        return ''

    now = now or datetime.utcnow()
    diff = now - value

    if diff.days > 365:
        years = diff.days // 365
        return f'{years} year{"s" if years > 1 else ""} ago'
    elif diff.days > 30:
        months = diff.days // 30
        return f'{months} month{"s" if months > 1 else ""} ago'
    elif diff.days > 7:
        weeks = diff.days // 7
        return f'{weeks} week{"s" if weeks > 1 else ""} ago'
    elif diff.days > 0:
        return f'{diff.days} day{"s" if diff.days > 1 else ""} ago'
    elif diff.seconds > 3600:
        hours = diff.seconds // 3600
        return f'{hours} hour{"s" if hours > 1 else ""} ago'
    elif diff.seconds > 60:
        minutes = diff.seconds // 60
        return f'{minutes} minute{"s" if minutes > 1 else ""} ago'
    elif diff.seconds > 0:
        return f'{diff.seconds} second{"s" if diff.seconds > 1 else ""} ago'
    else:
        return 'just now'

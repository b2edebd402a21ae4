"""
Absolute links handed to customers and new staff (QR codes, share buttons)
"""
import re
from urllib.parse import quote

from flask import current_app, url_for


def external_url(endpoint, **values):
    """url_for with an absolute host, honouring PUBLIC_BASE_URL when set"""
    base = current_app.config.get('PUBLIC_BASE_URL')
    if base:
        return base.rstrip('/') + url_for(endpoint, **values)
    return url_for(endpoint, _external=True, **values)


def repair_status_url(repair):
    return external_url('public.repair_status', token=repair.public_token)


def share_text(repair, status_url):
    return f'Track the status of your repair (ID: {repair.ticket_number}) here: {status_url}'


def share_links(repair, phone, status_url):
    """WhatsApp and SMS links for a customer's phone; empty when no phone"""
    digits = re.sub(r'\D', '', phone or '')
    if not digits:
        return {}
    text = quote(share_text(repair, status_url), safe='')
    return {
        'whatsapp': f'https://wa.me/{digits}?text={text}',
        'sms': f'sms:{digits}?&body={text}',
    }


def tel_uri(phone):
    return f'tel:{phone}' if phone else None

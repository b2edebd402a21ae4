"""
Hand-out page shown once after an account is created or its password reset.
"""
from flask import render_template

from ...services.auth import make_onboarding_token
from ...utils.links import external_url
from ...utils.qr_codes import QRCodeGenerator


def onboarding_card(account, temp_password):
    """Everything the admin needs to pass on: temp password plus QR link"""
    link = external_url('auth.onboard', token=make_onboarding_token(account))
    return {
        'account': account,
        'temp_password': temp_password,
        'link': link,
        'qr_code': QRCodeGenerator.to_data_url(link),
    }


def render_onboarding(cards, heading, back_endpoint, duplicates=(), skipped=0):
    return render_template('staff/onboarding.html',
                           cards=cards,
                           heading=heading,
                           back_endpoint=back_endpoint,
                           duplicates=duplicates,
                           skipped=skipped,
                           title=heading)

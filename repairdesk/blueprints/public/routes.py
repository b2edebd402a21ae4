from flask import render_template
from ...models import Repair
from ...services.repairs import technician_display_name
from ...utils.lifecycle import describe_status
from . import public_bp


@public_bp.route('/repair-status/<token>')
def repair_status(token):
    """Customer-facing status page reached from the ticket QR code"""
    repair = Repair.query.filter_by(public_token=token).first()
    if repair is None:
        return render_template('public/repair_status.html',
                               repair=None,
                               title='Repair Not Found'), 404

    return render_template('public/repair_status.html',
                           repair=repair,
                           description=describe_status(repair.status),
                           technician_name=technician_display_name(repair),
                           title=f'Repair {repair.ticket_number}')

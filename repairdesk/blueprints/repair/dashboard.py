from flask import render_template
from flask_login import login_required, current_user
from ...models import Repair, Technician
from ...services.donations import donated_keys, donation_key
from ...services.repairs import technician_display_name
from ...utils.lifecycle import RepairStatus, UNASSIGNED
from ...utils.permissions import visible_repairs_query, is_admin
from .forms import StatusForm, AssignForm
from . import repair_bp


def technician_choices(technicians):
    return [(UNASSIGNED, UNASSIGNED)] + [(str(t.id), t.name) for t in technicians]


def technician_names(repairs, technicians):
    """Map repair id to the name shown in the Technician column"""
    return {r.id: technician_display_name(r, technicians) for r in repairs}


@repair_bp.route('/')
@login_required
def dashboard():
    repairs = visible_repairs_query(current_user, Repair.query).order_by(
        Repair.created_at.desc(), Repair.id.desc()
    ).all()
    technicians = Technician.query.order_by(Technician.name).all()

    tabs = {
        'active': [r for r in repairs if r.status == RepairStatus.PENDING.value],
        'in_progress': [r for r in repairs if r.status == RepairStatus.IN_PROGRESS.value],
        'ready': [r for r in repairs if r.status == RepairStatus.READY.value],
    }

    assign_form = AssignForm()
    assign_form.technician.choices = technician_choices(technicians)

    return render_template('repair/dashboard.html',
                           tabs=tabs,
                           names=technician_names(repairs, technicians),
                           status_form=StatusForm(),
                           assign_form=assign_form,
                           is_admin=is_admin(current_user),
                           title='Dashboard')


@repair_bp.route('/archive')
@login_required
def archive():
    repairs = visible_repairs_query(current_user, Repair.query).filter(
        Repair.status == RepairStatus.ARCHIVED.value
    ).order_by(Repair.archived_at.desc(), Repair.id.desc()).all()
    technicians = Technician.query.order_by(Technician.name).all()

    groups = {}
    for repair in repairs:
        groups.setdefault(technician_display_name(repair, technicians), []).append(repair)

    donated = donated_keys()
    return render_template('repair/archive.html',
                           groups=sorted(groups.items()),
                           donated_ids={r.id for r in repairs if donation_key(r) in donated},
                           is_admin=is_admin(current_user),
                           title='Archived Repairs')

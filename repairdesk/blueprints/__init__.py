from flask import flash


def flash_service_error(error):
    """Show a ServiceError the way every page reports failures"""
    flash(f'{error.title}: {error.message}', 'danger')


def flash_form_errors(form):
    for field_errors in form.errors.values():
        for message in field_errors:
            flash(message, 'danger')

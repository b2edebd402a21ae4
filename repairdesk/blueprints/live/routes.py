"""
Live collection updates for the dashboard pages.

``/live/stream`` is a Server-Sent Events feed: on connect every collection
the user may see is sent in full, then each committed change resends the
affected collection. Each heartbeat also compares the collections against
the database, which picks up commits made by other worker processes. The
stream ends once the account is deleted or its password changes.
Reconnecting clients simply get the full state again.
"""
from flask import Response, current_app, jsonify, stream_with_context
from flask_login import login_required, current_user
from ... import db
from ...sync import SessionState, collections_for, current_hub, serialize_snapshot
from . import live_bp


def sse_event(name, payload):
    return f'event: {name}\ndata: {current_app.json.dumps(payload)}\n\n'


@live_bp.route('/stream')
@login_required
def stream():
    user = current_user._get_current_object()
    email = user.email
    hub = current_hub()
    retry_ms = current_app.config.get('LIVE_RETRY_MS', 3000)
    heartbeat = current_app.config.get('LIVE_HEARTBEAT_SECONDS', 15)

    @stream_with_context
    def generate():
        state = SessionState(hub, user)
        current_app.logger.debug(f'Live stream opened for {email}')
        try:
            yield f'retry: {retry_ms}\n\n'
            while True:
                names = state.wait(timeout=heartbeat)
                # End the read transaction so the next reload sees new commits
                db.session.rollback()
                if not state.active:
                    return
                if not names:
                    yield ': heartbeat\n\n'
                    continue
                for name in names:
                    yield sse_event(name, state.collections[name])
        finally:
            state.close()
            current_app.logger.debug(f'Live stream closed for {email}')

    response = Response(generate(), mimetype='text/event-stream')
    response.headers['Cache-Control'] = 'no-cache'
    response.headers['X-Accel-Buffering'] = 'no'
    return response


@live_bp.route('/snapshot/<name>')
@login_required
def snapshot(name):
    """One collection as JSON, for pages that poll instead of streaming"""
    if name not in collections_for(current_user):
        return jsonify({'message': 'Unknown collection.'}), 404
    return jsonify({'collection': name, 'items': serialize_snapshot(name, current_user)})

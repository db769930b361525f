"""
Click-tracking redirect
"""
from flask import jsonify, request, redirect, current_app
from podsee.tracking import tracking_bp
from podsee.services.click_tracking import ClickLogger, build_log_record, is_allowed_destination


@tracking_bp.route('/r')
def track_redirect():
    """Log an outbound click, then send the browser on with a 302"""
    # Only the first 'to' counts when it is repeated
    destination = request.args.get('to')

    if not destination:
        return jsonify({'error': 'Missing destination URL'}), 400

    if not is_allowed_destination(destination):
        return jsonify({'error': 'Invalid or restricted destination URL'}), 400

    record = build_log_record(
        request.args.get('centreId'),
        destination,
        request.headers.get('Referer'),
        request.headers.get('User-Agent')
    )
    ClickLogger.from_config(current_app.config).dispatch(record)

    return redirect(destination, code=302)

"""
Admin routes: comment moderation
"""
from functools import wraps
from flask import jsonify, request
from flask_login import login_required, current_user
from podsee.admin import admin_bp
from podsee.services.comment_service import AdminCommentService, COMMENT_NOT_FOUND


def admin_required(f):
    """Decorator to require admin role"""
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user.is_admin:
            return jsonify({'error': 'Admin access required'}), 403
        return f(*args, **kwargs)
    return decorated_function


def _error_status(error):
    return 404 if error == COMMENT_NOT_FOUND else 503


@admin_bp.route('/')
@admin_required
def dashboard():
    """Moderation overview"""
    comments, error = AdminCommentService().admin_fetch_all_comments()
    if error:
        return jsonify({'error': error}), 503

    return jsonify({
        'total': len(comments),
        'hidden': sum(1 for c in comments if c['hidden']),
        'topLevel': sum(1 for c in comments if c['parent_comment_id'] is None),
        'replies': sum(1 for c in comments if c['parent_comment_id'] is not None),
    })


@admin_bp.route('/comments')
@admin_required
def comments():
    """All comments, hidden ones included"""
    data, error = AdminCommentService().admin_fetch_all_comments()
    if error:
        return jsonify({'error': error}), 503
    return jsonify({'comments': data})


@admin_bp.route('/comments/<comment_id>/hidden', methods=['POST'])
@admin_required
def toggle_hidden(comment_id):
    """Hide or unhide a comment"""
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload.get('hidden'), bool):
        return jsonify({'error': "'hidden' must be true or false"}), 400

    comment, error = AdminCommentService().admin_toggle_hidden(comment_id, payload['hidden'])
    if error:
        return jsonify({'error': error}), _error_status(error)
    return jsonify(comment)


@admin_bp.route('/comments/<comment_id>/delete', methods=['POST'])
@admin_required
def delete_comment(comment_id):
    """Permanently delete a comment"""
    _, error = AdminCommentService().admin_delete_comment(comment_id)
    if error:
        return jsonify({'error': error}), _error_status(error)
    return jsonify({'success': True})

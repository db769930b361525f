"""
Public routes: landing search, centre detail, reviews
"""
from flask import jsonify, request, session, current_app
from podsee.main import main_bp
from podsee.services.centre_catalog import get_catalog, offering_key
from podsee.services.comment_service import CommentService
from podsee.services.comment_section import CommentSectionView, USERNAME_SESSION_KEY
from podsee.services.contact_service import contact_actions
from podsee.services.sanitizer import sanitize_text, validate_username


def _page_size():
    return current_app.config.get('COMMENTS_PAGE_SIZE', 20)


def _centre_or_404(centre_id):
    centre = get_catalog().get(centre_id)
    if centre is None:
        return None, (jsonify({'error': 'Centre not found'}), 404)
    return centre, None


def _centre_summary(centre):
    data = centre.as_dict()
    data['offerings'] = [o.as_dict() for o in centre.offerings if o.level and o.subject]
    return data


@main_bp.route('/')
def index():
    """Landing page data: search filters and centre names"""
    catalog = get_catalog()
    return jsonify({
        'filters': catalog.filter_options(),
        'centres': catalog.names(),
    })


@main_bp.route('/api/subjects')
def subjects():
    """Subjects offered for a level"""
    level = request.args.get('level', '').strip()
    if not level:
        return jsonify({'subjects': []})
    return jsonify({'subjects': get_catalog().subjects_for_level(level)})


@main_bp.route('/api/centres')
def search_centres():
    """Search by centre name, or by level and subject"""
    catalog = get_catalog()
    name = request.args.get('centre', '').strip()
    level = request.args.get('level', '').strip()
    subject = request.args.get('subject', '').strip()

    if name:
        results = catalog.search_by_name(name)
    elif level and subject:
        results = catalog.search(level, subject)
    else:
        return jsonify({'error': 'Please search by centre name OR select level and subject.'}), 400

    return jsonify({'centres': [_centre_summary(c) for c in results]})


@main_bp.route('/api/centres/<centre_id>')
def centre_detail(centre_id):
    """Centre detail with contact actions and the first page of reviews"""
    centre, error_response = _centre_or_404(centre_id)
    if error_response:
        return error_response

    view = CommentSectionView(
        centre,
        CommentService(),
        username_store=session,
        level=request.args.get('level') or None,
        subject=request.args.get('subject') or None,
        page_size=_page_size()
    )
    view.load()

    data = centre.as_dict()
    data['contactActions'] = contact_actions(centre)
    data['trackingWebhookUrl'] = current_app.config.get('PUBLIC_CLICK_LOG_WEBHOOK_URL')
    data['reviews'] = view.to_dict()
    data['username'] = view.username
    return jsonify(data)


@main_bp.route('/api/centres/<centre_id>/comments', methods=['GET'])
def list_comments(centre_id):
    """Page of top-level reviews, optionally for one class"""
    page_size = _page_size()
    offset = max(request.args.get('offset', 0, type=int) or 0, 0)
    level = request.args.get('level') or None
    subject = request.args.get('subject') or None

    comments, error = CommentService().fetch_comments(centre_id, page_size, offset, level, subject)
    if error:
        return jsonify({'error': error}), 503

    return jsonify({
        'comments': comments,
        'hasMore': len(comments) == page_size,
        'offset': offset + page_size,
    })


@main_bp.route('/api/centres/<centre_id>/comments', methods=['POST'])
def create_comment(centre_id):
    """Post a review or a reply"""
    centre, error_response = _centre_or_404(centre_id)
    if error_response:
        return error_response

    payload = request.get_json(silent=True) or {}
    username = payload.get('username') or session.get(USERNAME_SESSION_KEY)
    if not username:
        return jsonify({'error': 'Username required'}), 401

    parent_id = payload.get('parentCommentId') or None
    level = payload.get('level') or None
    subject = payload.get('subject') or None

    if not parent_id and (level or subject):
        known = {o.key for o in centre.offerings}
        if offering_key(level, subject) not in known:
            return jsonify({'error': 'Please select a class offered by this centre'}), 400

    comment, error = CommentService().create_comment(
        centre.centre_id, username, payload.get('text', ''), parent_id, level, subject
    )
    if error:
        return jsonify({'error': error}), 400

    if parent_id is None:
        comment['reply_count'] = 0
    return jsonify(comment), 201


@main_bp.route('/api/comments/<comment_id>/replies')
def list_replies(comment_id):
    """Replies to a review, oldest first"""
    limit = min(max(request.args.get('limit', 2, type=int) or 2, 1), 100)
    offset = max(request.args.get('offset', 0, type=int) or 0, 0)

    service = CommentService()
    replies, error = service.fetch_replies(comment_id, limit, offset)
    if error:
        return jsonify({'error': error}), 503

    count, error = service.get_reply_count(comment_id)
    if error:
        return jsonify({'error': error}), 503

    return jsonify({'replies': replies, 'replyCount': count})


@main_bp.route('/api/username', methods=['GET', 'POST'])
def username():
    """Display name kept for the browser session"""
    if request.method == 'GET':
        return jsonify({'username': session.get(USERNAME_SESSION_KEY, '')})

    payload = request.get_json(silent=True) or {}
    name = sanitize_text(payload.get('username'))
    errors = validate_username(name)
    if errors:
        return jsonify({'error': '. '.join(errors)}), 400

    session[USERNAME_SESSION_KEY] = name
    return jsonify({'username': name})

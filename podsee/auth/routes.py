"""
Authentication routes
"""
from datetime import datetime
from flask import jsonify, redirect, url_for, request
from flask_login import login_user, logout_user, current_user
from podsee.auth import auth_bp
from podsee.models.user import User
from podsee import db


def _safe_next(next_page):
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return url_for('admin.dashboard')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login route"""
    if current_user.is_authenticated:
        return redirect(url_for('admin.dashboard'))

    if request.method == 'POST':
        username = request.form.get('username')
        password = request.form.get('password')

        if not username or not password:
            return jsonify({'error': 'Invalid username or password'}), 401

        user = User.query.filter_by(username=username).first()

        if user and user.check_password(password):
            login_user(user)
            user.last_login = datetime.utcnow()
            db.session.commit()
            print(f"[Auth] {user.username} logged in")
            return redirect(_safe_next(request.args.get('next')))

        print(f"[Auth] Failed login for '{username}'")
        return jsonify({'error': 'Invalid username or password'}), 401

    return jsonify({'error': 'Login required'}), 401


@auth_bp.route('/logout')
def logout():
    """Logout route"""
    logout_user()
    return redirect(url_for('auth.login'))

from flask import jsonify, get_flashed_messages
from . import notifications_bp


@notifications_bp.route("/poll")
def poll():
    notes = get_flashed_messages(with_categories=True)
    data = [{"category": c, "message": m} for c, m in notes]
    return jsonify(data)

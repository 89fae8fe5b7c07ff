from flask import jsonify

from api.services import get_registration_tracker
from utils.decorators import handle_db_errors

from . import dancers_bp


@dancers_bp.route('/<dancer_id>/registration-fee', methods=['GET'])
@handle_db_errors
def get_registration_status(dancer_id):
    record = get_registration_tracker().get_status(dancer_id)
    return jsonify({
        'success': True,
        'record': record.to_dict()
    })

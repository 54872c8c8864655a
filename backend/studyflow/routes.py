# All API routes are in this one file
from flask import request, jsonify, Blueprint, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, create_access_token

from .errors import NotFound
from .schemas import (
    RegisterInput,
    LoginInput,
    VaultEntryInput,
    RevealInput,
    NoteInput,
    NoteUpdate,
)

# This line creates the 'api' object that __init__.py is looking for
api = Blueprint('api', __name__)


def services():
    return current_app.extensions['studyflow']


def _body():
    return request.get_json(silent=True)


def _auth_response(user, status):
    token = create_access_token(identity=user.id)
    return jsonify({'user': user.to_dict(), 'token': token}), status


# Basic index and health endpoints for quick checks
@api.route('/', methods=['GET'])
def api_index():
    current_app.logger.debug('GET /api invoked for index')
    return jsonify({
        'name': 'StudyFlow API',
        'version': 1,
        'endpoints': [
            'POST   /api/auth/register',
            'POST   /api/auth/login',
            'GET    /api/auth/me',
            'GET    /api/vault',
            'POST   /api/vault',
            'GET    /api/vault/<id>',
            'POST   /api/vault/<id>/reveal',
            'DELETE /api/vault/<id>',
            'GET    /api/notes',
            'POST   /api/notes',
            'GET    /api/notes/<id>',
            'PATCH  /api/notes/<id>',
            'DELETE /api/notes/<id>',
            'GET    /api/health'
        ]
    }), 200

@api.route('/health', methods=['GET'])
def api_health():
    current_app.logger.debug('GET /api/health invoked')
    return jsonify({'status': 'ok'}), 200

# Auth endpoints
@api.route('/auth/register', methods=['POST'])
def auth_register():
    current_app.logger.debug('POST /api/auth/register invoked')
    data = RegisterInput.parse(_body())
    user = services().credentials.register(data.email, data.password, data.display_name)
    return _auth_response(user, 201)

@api.route('/auth/login', methods=['POST'])
def auth_login():
    current_app.logger.debug('POST /api/auth/login invoked')
    data = LoginInput.parse(_body())
    user = services().credentials.authenticate(data.email, data.password)
    return _auth_response(user, 200)

@api.route('/auth/me', methods=['GET'])
@jwt_required()
def auth_me():
    user = services().credentials.get(get_jwt_identity())
    if user is None:
        raise NotFound('User not found')
    return jsonify(user.to_dict()), 200

# Vault endpoints
@api.route('/vault', methods=['GET'])
@jwt_required()
def vault_list():
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'GET /api/vault invoked by {owner_id}')
    entries = services().vault.list(owner_id)
    return jsonify([e.to_dict() for e in entries]), 200

@api.route('/vault', methods=['POST'])
@jwt_required()
def vault_create():
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'POST /api/vault invoked by {owner_id}')
    data = VaultEntryInput.parse(_body())
    entry = services().vault.create(owner_id, data.title, data.description, data.secret)
    return jsonify(entry.to_dict()), 201

@api.route('/vault/<entry_id>', methods=['GET'])
@jwt_required()
def vault_get(entry_id):
    entry = services().vault.get(get_jwt_identity(), entry_id)
    return jsonify(entry.to_dict()), 200

@api.route('/vault/<entry_id>/reveal', methods=['POST'])
@jwt_required()
def vault_reveal(entry_id):
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'POST /api/vault/{entry_id}/reveal invoked by {owner_id}')
    data = RevealInput.parse(_body())
    plaintext = services().vault.reveal(owner_id, entry_id, data.account_password)
    response = jsonify({'plaintext': plaintext})
    response.headers['Cache-Control'] = 'no-store'
    return response, 200

@api.route('/vault/<entry_id>', methods=['DELETE'])
@jwt_required()
def vault_delete(entry_id):
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'DELETE /api/vault/{entry_id} invoked by {owner_id}')
    services().vault.delete(owner_id, entry_id)
    return '', 204

# Note endpoints
@api.route('/notes', methods=['GET'])
@jwt_required()
def notes_list():
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'GET /api/notes invoked by {owner_id}')
    notes = services().notes.list_active(owner_id)
    return jsonify([n.to_dict() for n in notes]), 200

@api.route('/notes', methods=['POST'])
@jwt_required()
def notes_create():
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'POST /api/notes invoked by {owner_id}')
    data = NoteInput.parse(_body())
    note = services().notes.create(owner_id, data.title, data.content, data.pinned)
    return jsonify(note.to_dict()), 201

@api.route('/notes/<note_id>', methods=['GET'])
@jwt_required()
def notes_get(note_id):
    note = services().notes.get(get_jwt_identity(), note_id)
    return jsonify(note.to_dict()), 200

@api.route('/notes/<note_id>', methods=['PATCH'])
@jwt_required()
def notes_update(note_id):
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'PATCH /api/notes/{note_id} invoked by {owner_id}')
    data = NoteUpdate.parse(_body())
    note = services().notes.update(
        owner_id, note_id, title=data.title, content=data.content, pinned=data.pinned
    )
    return jsonify(note.to_dict()), 200

@api.route('/notes/<note_id>', methods=['DELETE'])
@jwt_required()
def notes_delete(note_id):
    owner_id = get_jwt_identity()
    current_app.logger.debug(f'DELETE /api/notes/{note_id} invoked by {owner_id}')
    services().notes.delete(owner_id, note_id)
    return '', 204

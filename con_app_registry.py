"""
APP REGISTRY

Admin-curated list of application ids. New apps start active; the admin can
toggle them off and on again. Nothing else is stored.
"""

ZERO_ADDRESS = '0' * 64

# app_id -> {'active': bool, 'registered_at': int}
apps = Hash()

# admin, app_count
metadata = Hash()

# Events
AppRegisteredEvent = LogEvent('AppRegistered', {
    'app_id': {'type': str, 'idx': True},
    'registration_block': {'type': int}
})

AppStatusUpdatedEvent = LogEvent('AppStatusUpdated', {
    'app_id': {'type': str, 'idx': True},
    'status': {'type': str}
})

AdminTransferredEvent = LogEvent('AdminTransferred', {
    'previous_admin': {'type': str, 'idx': True},
    'new_admin': {'type': str, 'idx': True}
})

@construct
def seed():
    metadata['admin'] = ctx.caller
    metadata['app_count'] = 0

def require_admin():
    assert ctx.caller == metadata['admin'], 'Only admin can call this function'

def require_app_id(app_id: str):
    assert app_id, 'App ID cannot be empty'

@export
def get_admin():
    return metadata['admin']

@export
def transfer_admin(new_admin: str):
    require_admin()
    assert new_admin and new_admin != ZERO_ADDRESS, 'Invalid admin address'

    previous = metadata['admin']
    metadata['admin'] = new_admin

    AdminTransferredEvent({'previous_admin': previous, 'new_admin': new_admin})

@export
def register_app(app_id: str):
    require_admin()
    require_app_id(app_id)
    assert apps[app_id] is None, 'App ID already registered'

    apps[app_id] = {
        'active': True,
        'registered_at': block_num
    }
    metadata['app_count'] = metadata['app_count'] + 1

    AppRegisteredEvent({'app_id': app_id, 'registration_block': block_num})

@export
def update_app_status(app_id: str, is_active: bool):
    require_admin()
    require_app_id(app_id)
    entry = apps[app_id]
    assert entry is not None, 'App ID not registered'

    apps[app_id] = {
        'active': is_active,
        'registered_at': entry['registered_at']
    }

    AppStatusUpdatedEvent({
        'app_id': app_id,
        'status': 'active' if is_active else 'inactive'
    })

@export
def is_app_active(app_id: str):
    entry = apps[app_id]
    return entry is not None and entry['active']

@export
def get_app(app_id: str):
    entry = apps[app_id]
    if entry is None:
        return {
            'exists': False,
            'active': False,
            'registered_at': 0
        }
    return {
        'exists': True,
        'active': entry['active'],
        'registered_at': entry['registered_at']
    }

@export
def get_app_count():
    return metadata['app_count']

"""
INFERENCE STATS

Admin-written, append-only usage snapshots per app id.
"""

ZERO_ADDRESS = '0' * 64

# (app_id, index) -> {'inference_count': int, 'token_count': int, 'block_num': int}
stats = Hash()

# app_id -> number of entries
stats_count = Hash(default_value=0)

# admin
metadata = Hash()

# Events
StatsWrittenEvent = LogEvent('StatsWritten', {
    'app_id': {'type': str, 'idx': True},
    'block_num': {'type': int},
    'inference_count': {'type': int},
    'token_count': {'type': int}
})

AdminTransferredEvent = LogEvent('AdminTransferred', {
    'previous_admin': {'type': str, 'idx': True},
    'new_admin': {'type': str, 'idx': True}
})

@construct
def seed():
    metadata['admin'] = ctx.caller

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
def write_stats(app_id: str, inference_count: int, token_count: int):
    require_admin()
    require_app_id(app_id)
    assert inference_count >= 0 and token_count >= 0, 'Counts cannot be negative'

    index = stats_count[app_id]
    stats[app_id, index] = {
        'inference_count': inference_count,
        'token_count': token_count,
        'block_num': block_num
    }
    stats_count[app_id] = index + 1

    StatsWrittenEvent({
        'app_id': app_id,
        'block_num': block_num,
        'inference_count': inference_count,
        'token_count': token_count
    })
    return index

@export
def get_stats_count(app_id: str):
    require_app_id(app_id)
    return stats_count[app_id]

@export
def get_latest_stats(app_id: str):
    require_app_id(app_id)
    count = stats_count[app_id]
    assert count > 0, 'No stats available'
    return stats[app_id, count - 1]

@export
def get_stats_by_index(app_id: str, index: int):
    require_app_id(app_id)
    assert 0 <= index < stats_count[app_id], 'Index out of bounds'
    return stats[app_id, index]

@export
def get_stats_history(app_id: str):
    require_app_id(app_id)
    history = []
    for i in range(stats_count[app_id]):
        history.append(stats[app_id, i])
    return history

"""
INFERENCE LISTENER

Admin-only relay that turns submitted inference log hashes into events.
Each app id may submit at most `max_submissions` entries per block; a batch
spends one unit of that quota per entry.
"""

DEFAULT_MAX_SUBMISSIONS = 100
ZERO_ADDRESS = '0' * 64

# (app_id, block_num) -> entries submitted
submissions = Hash(default_value=0)

# admin, max_submissions
metadata = Hash()

# Events
InferenceLogEvent = LogEvent('InferenceLog', {
    'app_id': {'type': str, 'idx': True},
    'user_wallet': {'type': str, 'idx': True},
    'log_hash': {'type': str},
    'block_num': {'type': int}
})

BatchInferenceLogsEvent = LogEvent('BatchInferenceLogs', {
    'app_id': {'type': str, 'idx': True},
    'count': {'type': int},
    'block_num': {'type': int}
})

MaxSubmissionsUpdatedEvent = LogEvent('MaxSubmissionsUpdated', {
    'previous_limit': {'type': int},
    'new_limit': {'type': int}
})

AdminTransferredEvent = LogEvent('AdminTransferred', {
    'previous_admin': {'type': str, 'idx': True},
    'new_admin': {'type': str, 'idx': True}
})

@construct
def seed():
    metadata['admin'] = ctx.caller
    metadata['max_submissions'] = DEFAULT_MAX_SUBMISSIONS

def require_admin():
    assert ctx.caller == metadata['admin'], 'Only admin can call this function'

def require_entry(user_wallet: str, log_hash: str):
    assert user_wallet and user_wallet != ZERO_ADDRESS, 'Invalid user wallet address'
    assert log_hash and log_hash.strip('0') not in ('', 'x'), 'Invalid log hash'

def consume_quota(app_id: str, entries: int):
    used = submissions[app_id, block_num]
    assert used + entries <= metadata['max_submissions'], 'Rate limit exceeded'
    submissions[app_id, block_num] = used + entries

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
def get_max_submissions():
    return metadata['max_submissions']

@export
def update_max_submissions(limit: int):
    require_admin()
    assert limit > 0, 'Limit must be greater than zero'

    previous = metadata['max_submissions']
    metadata['max_submissions'] = limit

    MaxSubmissionsUpdatedEvent({'previous_limit': previous, 'new_limit': limit})

@export
def get_submission_count(app_id: str, block: int):
    return submissions[app_id, block]

@export
def submit_inference_log(app_id: str, user_wallet: str, log_hash: str):
    require_admin()
    assert app_id, 'App ID cannot be empty'
    require_entry(user_wallet, log_hash)
    consume_quota(app_id, 1)

    InferenceLogEvent({
        'app_id': app_id,
        'user_wallet': user_wallet,
        'log_hash': log_hash,
        'block_num': block_num
    })

@export
def submit_batch_inference_logs(app_id: str, user_wallets: list, log_hashes: list):
    require_admin()
    assert app_id, 'App ID cannot be empty'
    assert len(user_wallets) > 0, 'Empty batch'
    assert len(user_wallets) == len(log_hashes), 'Array length mismatch'

    for i in range(len(user_wallets)):
        require_entry(user_wallets[i], log_hashes[i])

    consume_quota(app_id, len(user_wallets))

    for i in range(len(user_wallets)):
        InferenceLogEvent({
            'app_id': app_id,
            'user_wallet': user_wallets[i],
            'log_hash': log_hashes[i],
            'block_num': block_num
        })

    BatchInferenceLogsEvent({
        'app_id': app_id,
        'count': len(user_wallets),
        'block_num': block_num
    })
    return len(user_wallets)

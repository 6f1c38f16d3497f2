"""
STAKING VAULT

Pools a single fungible asset and issues proportional shares against it.
The asset balance is never tracked here; it is read live from the asset
contract, so tokens sent straight to the vault (rewards) raise the value
of every outstanding share.

Rounding always favours the vault:
  - deposit  (assets in  -> shares out)    rounds down
  - mint     (shares out -> assets in)     rounds up
  - withdraw (assets out -> shares burned) rounds up
  - redeem   (shares in  -> assets out)    rounds down

Nothing value-bearing works until the initializer has called initialize(),
which locks a minimum deposit and mints INITIAL_SHARE_MINT shares to an
address nobody controls. That floor makes donation-based share price
manipulation against the first depositor unprofitable.
"""

# -----------------------------------------------------------------------------
# Parameters
# -----------------------------------------------------------------------------

ASSET_DECIMALS = 18
MIN_INITIAL_ASSETS = 10 ** ASSET_DECIMALS
INITIAL_SHARE_MINT = 10 ** ASSET_DECIMALS

DEAD_ADDRESS = '0' * 63 + '1'

METADATA_KEYS = ('name', 'symbol')

# No per-receiver cap on deposits or mints
MAX_AMOUNT = 2 ** 256 - 1

# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

# address -> shares
balances = Hash(default_value=0)

# (owner, spender) -> shares
approvals = Hash(default_value=0)

# name, symbol, asset, initializer, initialized, total_supply
metadata = Hash()

# Events
InitializedEvent = LogEvent('Initialized', {
    'initializer': {'type': str, 'idx': True},
    'assets': {'type': int},
    'shares': {'type': int}
})

DepositEvent = LogEvent('Deposit', {
    'sender': {'type': str, 'idx': True},
    'owner': {'type': str, 'idx': True},
    'assets': {'type': int},
    'shares': {'type': int}
})

WithdrawEvent = LogEvent('Withdraw', {
    'sender': {'type': str, 'idx': True},
    'receiver': {'type': str, 'idx': True},
    'owner': {'type': str, 'idx': True},
    'assets': {'type': int},
    'shares': {'type': int}
})

TransferEvent = LogEvent('Transfer', {
    'from': {'type': str, 'idx': True},
    'to': {'type': str, 'idx': True},
    'amount': {'type': int}
})

ApproveEvent = LogEvent('Approve', {
    'owner': {'type': str, 'idx': True},
    'spender': {'type': str, 'idx': True},
    'amount': {'type': int}
})

# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@construct
def seed(asset_contract: str, name: str, symbol: str):
    token = importlib.import_module(asset_contract)
    assert token.decimals() == ASSET_DECIMALS, 'Asset must use 18 decimals'

    metadata['name'] = name
    metadata['symbol'] = symbol
    metadata['asset'] = asset_contract
    metadata['initializer'] = ctx.caller
    metadata['initialized'] = False
    metadata['total_supply'] = 0

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def asset_token():
    return importlib.import_module(metadata['asset'])

def vault_assets():
    return asset_token().balance_of(address=ctx.this)

def require_initialized():
    assert metadata['initialized'], 'NotInitialized: vault is not initialized'

def require_amount(amount: int):
    assert amount >= 0, 'InvalidAmount: amount cannot be negative'

def require_receiver(receiver: str):
    assert receiver, 'InvalidAddress: receiver cannot be empty'
    assert receiver != DEAD_ADDRESS, 'Unauthorized: burn address cannot receive shares'

def require_owner(owner: str):
    assert owner, 'InvalidAddress: owner cannot be empty'
    assert owner != DEAD_ADDRESS, 'Unauthorized: burn address shares are locked'

def mul_div(x: int, y: int, denominator: int, round_up: bool):
    # Python ints are unbounded, so x * y cannot overflow before the division
    assert denominator > 0, 'NotInitialized: vault has no backing'
    product = x * y
    result = product // denominator
    if round_up and product % denominator != 0:
        result += 1
    return result

def shares_for_assets(assets: int, round_up: bool):
    return mul_div(assets, metadata['total_supply'], vault_assets(), round_up)

def assets_for_shares(shares: int, round_up: bool):
    return mul_div(shares, vault_assets(), metadata['total_supply'], round_up)

def pull_assets(sender: str, amount: int):
    token = asset_token()
    before = token.balance_of(address=ctx.this)
    token.transfer_from(amount=amount, to=ctx.this, main_account=sender)
    received = token.balance_of(address=ctx.this) - before
    assert received == amount, 'TransferFailed: asset transfer into vault failed'

def push_assets(receiver: str, amount: int):
    token = asset_token()
    before = token.balance_of(address=ctx.this)
    token.transfer(amount=amount, to=receiver)
    sent = before - token.balance_of(address=ctx.this)
    assert sent == amount, 'TransferFailed: asset transfer out of vault failed'

def spend_allowance(owner: str, spender: str, shares: int):
    if owner == spender:
        return
    allowed = approvals[owner, spender]
    assert allowed >= shares, 'InsufficientAllowance: spender allowance too low'
    approvals[owner, spender] = allowed - shares

def mint_shares(receiver: str, shares: int):
    balances[receiver] += shares
    metadata['total_supply'] = metadata['total_supply'] + shares

def require_shares(owner: str, shares: int):
    assert balances[owner] >= shares, 'InsufficientBalance: owner has too few shares'

def burn_shares(owner: str, shares: int):
    # Balance is checked by require_shares before any write
    balances[owner] -= shares
    metadata['total_supply'] = metadata['total_supply'] - shares

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

@export
def get_metadata():
    return {
        'name': metadata['name'],
        'symbol': metadata['symbol'],
        'asset': metadata['asset'],
        'initializer': metadata['initializer'],
        'initialized': metadata['initialized'],
        'total_supply': metadata['total_supply']
    }

@export
def change_metadata(key: str, value: str):
    assert ctx.caller == metadata['initializer'], 'Unauthorized: only the initializer can set metadata'
    assert key in METADATA_KEYS, 'Unauthorized: metadata key is immutable'
    metadata[key] = value

@export
def asset():
    return metadata['asset']

@export
def initialized():
    return metadata['initialized']

@export
def total_assets():
    return vault_assets()

@export
def total_supply():
    return metadata['total_supply']

@export
def balance_of(address: str):
    return balances[address]

@export
def allowance(owner: str, spender: str):
    return approvals[owner, spender]

@export
def convert_to_shares(assets: int):
    require_initialized()
    require_amount(assets)
    return shares_for_assets(assets, False)

@export
def convert_to_assets(shares: int):
    require_initialized()
    require_amount(shares)
    return assets_for_shares(shares, False)

@export
def preview_deposit(assets: int):
    require_initialized()
    require_amount(assets)
    return shares_for_assets(assets, False)

@export
def preview_mint(shares: int):
    require_initialized()
    require_amount(shares)
    return assets_for_shares(shares, True)

@export
def preview_withdraw(assets: int):
    require_initialized()
    require_amount(assets)
    return shares_for_assets(assets, True)

@export
def preview_redeem(shares: int):
    require_initialized()
    require_amount(shares)
    return assets_for_shares(shares, False)

@export
def max_deposit(receiver: str):
    if not metadata['initialized'] or receiver == DEAD_ADDRESS:
        return 0
    return MAX_AMOUNT

@export
def max_mint(receiver: str):
    if not metadata['initialized'] or receiver == DEAD_ADDRESS:
        return 0
    return MAX_AMOUNT

@export
def max_withdraw(owner: str):
    if not metadata['initialized'] or owner == DEAD_ADDRESS:
        return 0
    return assets_for_shares(balances[owner], False)

@export
def max_redeem(owner: str):
    if not metadata['initialized'] or owner == DEAD_ADDRESS:
        return 0
    return balances[owner]

# -----------------------------------------------------------------------------
# Initialization
# -----------------------------------------------------------------------------

@export
def initialize(amount: int):
    assert not metadata['initialized'], 'AlreadyInitialized: vault is already initialized'
    assert ctx.caller == metadata['initializer'], 'Unauthorized: only the initializer can initialize'
    assert amount >= MIN_INITIAL_ASSETS, 'BelowMinimumDeposit: initial deposit too small'

    # Assets must land before any share exists
    pull_assets(ctx.caller, amount)
    mint_shares(DEAD_ADDRESS, INITIAL_SHARE_MINT)
    metadata['initialized'] = True

    InitializedEvent({
        'initializer': ctx.caller,
        'assets': amount,
        'shares': INITIAL_SHARE_MINT
    })
    return INITIAL_SHARE_MINT

# -----------------------------------------------------------------------------
# Core: deposit / mint / withdraw / redeem
# -----------------------------------------------------------------------------

@export
def deposit(assets: int, receiver: str):
    require_initialized()
    require_amount(assets)
    require_receiver(receiver)

    if assets == 0:
        return 0

    shares = shares_for_assets(assets, False)
    pull_assets(ctx.caller, assets)
    mint_shares(receiver, shares)

    DepositEvent({
        'sender': ctx.caller,
        'owner': receiver,
        'assets': assets,
        'shares': shares
    })
    return shares

@export
def mint(shares: int, receiver: str):
    require_initialized()
    require_amount(shares)
    require_receiver(receiver)

    if shares == 0:
        return 0

    assets = assets_for_shares(shares, True)
    pull_assets(ctx.caller, assets)
    mint_shares(receiver, shares)

    DepositEvent({
        'sender': ctx.caller,
        'owner': receiver,
        'assets': assets,
        'shares': shares
    })
    return assets

@export
def withdraw(assets: int, receiver: str, owner: str):
    require_initialized()
    require_amount(assets)
    require_owner(owner)
    assert receiver, 'InvalidAddress: receiver cannot be empty'

    if assets == 0:
        return 0

    shares = shares_for_assets(assets, True)
    require_shares(owner, shares)
    spend_allowance(owner, ctx.caller, shares)
    burn_shares(owner, shares)
    push_assets(receiver, assets)

    WithdrawEvent({
        'sender': ctx.caller,
        'receiver': receiver,
        'owner': owner,
        'assets': assets,
        'shares': shares
    })
    return shares

@export
def redeem(shares: int, receiver: str, owner: str):
    require_initialized()
    require_amount(shares)
    require_owner(owner)
    assert receiver, 'InvalidAddress: receiver cannot be empty'

    if shares == 0:
        return 0

    assets = assets_for_shares(shares, False)
    require_shares(owner, shares)
    spend_allowance(owner, ctx.caller, shares)
    burn_shares(owner, shares)
    if assets > 0:
        push_assets(receiver, assets)

    WithdrawEvent({
        'sender': ctx.caller,
        'receiver': receiver,
        'owner': owner,
        'assets': assets,
        'shares': shares
    })
    return assets

# -----------------------------------------------------------------------------
# Share token
# -----------------------------------------------------------------------------

@export
def transfer(amount: int, to: str):
    require_amount(amount)
    require_owner(ctx.caller)
    require_receiver(to)

    balance = balances[ctx.caller]
    assert balance >= amount, 'InsufficientBalance: not enough shares to send'
    balances[ctx.caller] = balance - amount
    balances[to] += amount

    TransferEvent({'from': ctx.caller, 'to': to, 'amount': amount})

@export
def approve(amount: int, to: str):
    require_amount(amount)
    assert to, 'InvalidAddress: spender cannot be empty'

    approvals[ctx.caller, to] = amount

    ApproveEvent({'owner': ctx.caller, 'spender': to, 'amount': amount})

@export
def transfer_from(amount: int, to: str, main_account: str):
    require_amount(amount)
    require_owner(main_account)
    require_receiver(to)

    allowed = approvals[main_account, ctx.caller]
    assert allowed >= amount, 'InsufficientAllowance: spender allowance too low'
    balance = balances[main_account]
    assert balance >= amount, 'InsufficientBalance: not enough shares to send'

    approvals[main_account, ctx.caller] = allowed - amount
    balances[main_account] = balance - amount
    balances[to] += amount

    TransferEvent({'from': main_account, 'to': to, 'amount': amount})

# -----------------------------------------------------------------------------
# Invariants
# -----------------------------------------------------------------------------

@export
def verify_supply_invariant():
    # Sum of holder balances should equal total_supply
    total = 0
    count = 0
    for v in balances.all():
        if v:
            total += int(v)
            count += 1
    expected = metadata['total_supply']
    return {
        'ok': total == expected,
        'sum_of_balances': total,
        'expected': expected,
        'holders': count
    }

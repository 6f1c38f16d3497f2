import logging
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

# ---- Chain-constant parameters & helpers (mirror contract) ----

ASSET_DECIMALS = 18
MIN_INITIAL_ASSETS = 10 ** ASSET_DECIMALS
INITIAL_SHARE_MINT = 10 ** ASSET_DECIMALS

DEAD_ADDRESS = '0' * 63 + '1'

def mul_div(x: int, y: int, denominator: int, round_up: bool = False) -> int:
    if denominator <= 0:
        raise ValueError("Vault has no backing; initialize it first")
    product = x * y
    result = product // denominator
    if round_up and product % denominator != 0:
        result += 1
    return result

def shares_for_assets(assets: int, total_assets: int, total_supply: int, round_up: bool = False) -> int:
    return mul_div(assets, total_supply, total_assets, round_up)

def assets_for_shares(shares: int, total_assets: int, total_supply: int, round_up: bool = False) -> int:
    return mul_div(shares, total_assets, total_supply, round_up)

def preview_deposit(assets: int, total_assets: int, total_supply: int) -> int:
    return shares_for_assets(assets, total_assets, total_supply)

def preview_mint(shares: int, total_assets: int, total_supply: int) -> int:
    return assets_for_shares(shares, total_assets, total_supply, round_up=True)

def preview_withdraw(assets: int, total_assets: int, total_supply: int) -> int:
    return shares_for_assets(assets, total_assets, total_supply, round_up=True)

def preview_redeem(shares: int, total_assets: int, total_supply: int) -> int:
    return assets_for_shares(shares, total_assets, total_supply)

def to_base_units(value, decimals: int = ASSET_DECIMALS) -> int:
    """
    Converts a human amount ("1.5", Decimal("1.5"), 2) to integer base units.
    Fractions finer than the token's precision are rejected, not rounded.
    """
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{value!r} has more than {decimals} decimals")
    if scaled < 0:
        raise ValueError("Amount cannot be negative")
    return int(scaled)

def from_base_units(amount: int, decimals: int = ASSET_DECIMALS) -> Decimal:
    return Decimal(amount).scaleb(-decimals)

def _require_amount(amount: int, label: str):
    if amount is None or amount < 0:
        raise ValueError(f"{label} must be a non-negative integer")

# ---- High-level builders -----------------------------------------------------

def build_initialize(amount: int):
    """
    Returns args for asset.approve() and vault.initialize():
        (approve_amount, amount)
    Initializer-only on-chain.
    """
    _require_amount(amount, "amount")
    if amount < MIN_INITIAL_ASSETS:
        raise ValueError("Initial deposit must be at least MIN_INITIAL_ASSETS")

    return {
        'approve_amount': amount,
        'amount': amount,
        'sink_shares': INITIAL_SHARE_MINT
    }

def build_deposit(total_assets: int, total_supply: int, assets: int):
    """
    Returns args for asset.approve() and vault.deposit():
        (approve_amount, assets, expected_shares)
    You still supply `receiver` when calling the chain method.
    """
    _require_amount(assets, "assets")
    shares = preview_deposit(assets, total_assets, total_supply)
    logger.debug("deposit plan: %s assets -> %s shares", assets, shares)

    return {
        'approve_amount': assets,
        'assets': assets,
        'expected_shares': shares
    }

def build_mint(total_assets: int, total_supply: int, shares: int):
    """
    Returns args for asset.approve() and vault.mint():
        (approve_amount, shares)
    approve_amount is rounded up exactly as the vault rounds it.
    """
    _require_amount(shares, "shares")
    assets = preview_mint(shares, total_assets, total_supply)
    logger.debug("mint plan: %s shares <- %s assets", shares, assets)

    return {
        'approve_amount': assets,
        'shares': shares,
        'expected_assets': assets
    }

def build_withdraw(total_assets: int, total_supply: int, assets: int, owner_shares: int):
    """
    Returns args for vault.withdraw():
        (assets, expected_shares)
    Raises if the owner cannot cover the shares the vault will burn.
    """
    _require_amount(assets, "assets")
    shares = preview_withdraw(assets, total_assets, total_supply)
    if shares > owner_shares:
        raise ValueError("Owner does not hold enough shares for this withdrawal")
    logger.debug("withdraw plan: %s assets -> burn %s shares", assets, shares)

    return {
        'assets': assets,
        'expected_shares': shares
    }

def build_redeem(total_assets: int, total_supply: int, shares: int, owner_shares: int):
    """
    Returns args for vault.redeem():
        (shares, expected_assets)
    """
    _require_amount(shares, "shares")
    if shares > owner_shares:
        raise ValueError("Owner does not hold enough shares to redeem")
    assets = preview_redeem(shares, total_assets, total_supply)
    logger.debug("redeem plan: %s shares -> %s assets", shares, assets)

    return {
        'shares': shares,
        'expected_assets': assets
    }

# ---- Convenience: wallet-side position tracker (optional) -------------------

class VaultPosition:
    """
    Optional local helper to track a holder's shares and what they are worth.
    Refresh the vault totals with `sync` before reading `value`.
    """
    def __init__(self, shares: int = 0):
        self.shares = shares
        self.total_assets = 0
        self.total_supply = 0

    def sync(self, total_assets: int, total_supply: int):
        self.total_assets = total_assets
        self.total_supply = total_supply

    def apply_incoming(self, shares: int):
        self.shares += shares
        return self.shares

    def apply_outgoing(self, shares: int):
        if shares > self.shares:
            raise ValueError("Position does not hold that many shares")
        self.shares -= shares
        return self.shares

    @property
    def value(self) -> int:
        if self.total_supply == 0:
            return 0
        return preview_redeem(self.shares, self.total_assets, self.total_supply)

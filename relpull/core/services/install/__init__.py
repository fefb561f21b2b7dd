"""
Release install service — package re-exports.

Each symbol lives in its single-responsibility module, grouped by
layer (domain → resolver → execution → orchestration)::

    from relpull.core.services.install import install_release
"""

# ── L1: Domain ──
from relpull.core.services.install.selection import (  # noqa: F401
    choose_asset,
    fail_on_ambiguous,
    pick_first,
    select_candidates,
)

# ── L2: Resolver ──
from relpull.core.services.install.resolution import (  # noqa: F401
    fetch_release,
    release_tags,
    resolve_version,
    resolve_with_release,
)

# ── L4: Execution ──
from relpull.core.services.install.download import download  # noqa: F401
from relpull.core.services.install.locate import find_binary  # noqa: F401
from relpull.core.services.install.transaction import (  # noqa: F401
    check_up_to_date,
    commit,
)
from relpull.core.services.install.unpack import (  # noqa: F401
    Extracted,
    Standalone,
    classify,
    classify_and_extract,
)

# ── L5: Orchestration ──
from relpull.core.services.install.pipeline import (  # noqa: F401
    InstallResult,
    install_release,
)

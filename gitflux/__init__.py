"""gitflux — derive release versions and compatibility requirements from
git-flow style branch and tag names.

    from gitflux.derive import VersionDeriver

    derivation = VersionDeriver().derive()
    print(derivation.version, derivation.decision.reason)
"""

__version__ = "0.1.0"

import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]

CONTEXTS = ["catalogue", "identity", "ordering"]

# bcrypt ships a compiled extension; a cached wheel may target another interpreter.
_C_EXT_PACKAGES = ["bcrypt"]


def _install(session: nox.Session) -> None:
    """Install medistock with its test extra into the nox virtualenv."""
    session.run("poetry", "install", "--extras", "test", external=True)
    session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_C_EXT_PACKAGES)


def _layer(layer: str) -> list[str]:
    return [f"tests/{context}/{layer}/" for context in CONTEXTS]


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Full suite, in-memory stores."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Aggregates, value objects, tokens and policy only; no handlers or HTTP."""
    _install(session)
    session.run("pytest", *_layer("domain"))


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_api(session: nox.Session) -> None:
    """Routers through TestClient, plus the BDD scenarios."""
    _install(session)
    session.run("pytest", *_layer("integration"), *_layer("bdd"))


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_sqlite(session: nox.Session) -> None:
    """Command handlers against file-backed sqlite, exercising versioned saves in SQL."""
    _install(session)
    session.run("pytest", "--env", "sqlite", *_layer("application"))

"""Certificate eligibility rule."""

from cert_desk.run.domain.run import Run


def is_eligible(run: Run) -> bool:
    """A run can be certified once it has passed and holds no certificate yet."""
    return run.status == "pass" and run.certificate is None

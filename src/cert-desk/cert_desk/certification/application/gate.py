"""CertificationGate — issues a certificate for an eligible run."""

from cert_desk.certification.domain.eligibility import is_eligible
from cert_desk.certification.domain.errors import CertificationIneligibleError
from cert_desk.certification.domain.observer import CertificationObserver
from cert_desk.core.errors import CertDeskError
from cert_desk.persistence.domain.store import RunStore
from cert_desk.run.domain.run import Run


class CertificationGate:
    """Checks eligibility and asks the store to bind a certificate to the run.

    On failure nothing is attached, so calling ``issue`` again is always safe.
    """

    def __init__(self, store: RunStore, observer: CertificationObserver) -> None:
        self._store = store
        self._observer = observer

    async def issue(self, run: Run) -> Run:
        """Issue a certificate and return the run carrying it.

        Raises:
            CertificationIneligibleError: if the run has not passed or is
                already certified.
            CertDeskError: whatever the store raises when issuance fails.
        """
        if not is_eligible(run):
            raise CertificationIneligibleError(run_id=run.id, reason=_ineligible_reason(run))

        self._observer.certificate_issue_started(run_id=run.id)
        try:
            certificate = await self._store.issue_certificate(run_id=run.id)
        except CertDeskError as exc:
            self._observer.certificate_issue_failed(run_id=run.id, reason=str(exc))
            raise

        self._observer.certificate_issued(
            run_id=run.id, certificate_id=certificate.id, score=certificate.score
        )
        return run.model_copy(update={"certificate": certificate})


def _ineligible_reason(run: Run) -> str:
    if run.certificate is not None:
        return f"already certified as '{run.certificate.id}'"
    return f"status is '{run.status}', not 'pass'"

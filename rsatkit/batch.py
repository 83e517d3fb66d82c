"""
Batch installation across an inventory snapshot.
"""
import sys
from .models import BatchReport


class BatchInstallCoordinator:
    """Install every not-yet-installed capability of a snapshot, in order."""

    def __init__(self, installer):
        self.installer = installer

    def run_all(self, snapshot, on_outcome=None):
        """
        Install all pending entries of snapshot sequentially.

        Args:
            snapshot: InventorySnapshot (or any ordered sequence of CapabilityRecord)
            on_outcome: Optional callable invoked with (record, outcome) after each item.
                Errors it raises are logged and do not stop the batch.

        Returns:
            A BatchReport. nothing_to_do is set when every entry was already
            installed. A KeyboardInterrupt stops the run and returns a report
            of the completed attempts with cancelled set.
        """
        report = BatchReport()
        pending = [record for record in snapshot if not record.installed]
        if not pending:
            print("Nothing to install, all capabilities are present", file=sys.stderr)
            report.nothing_to_do = True
            return report

        print(f"Installing {len(pending)} of {len(snapshot)} capabilities", file=sys.stderr)
        for index, record in enumerate(pending, start=1):
            try:
                outcome = self.installer.install(record)
            except KeyboardInterrupt:
                print(f"Batch interrupted at {record.id} ({index}/{len(pending)})", file=sys.stderr)
                report.cancelled = True
                break
            report.record(outcome)
            print(f"[{index}/{len(pending)}] {record.id}: {outcome.result.value}", file=sys.stderr)
            if on_outcome is not None:
                try:
                    on_outcome(record, outcome)
                except Exception as e:
                    print(f"Progress callback failed for {record.id}: {str(e)}", file=sys.stderr)

        print(
            f"Batch finished: attempted={report.attempted}, succeeded={report.succeeded}, failed={report.failed}",
            file=sys.stderr,
        )
        return report

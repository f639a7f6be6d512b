"""
Simple example demonstrating the batcher.
Shows a progressive batch with two sets which is driven by polling requests,
the way a web page would drive it through the polling endpoint.

Prerequisites:
1. Install the batcher package: pip install batcher
2. Set up a PostgreSQL database
3. Update the DatabaseConfiguration in BatcherExample.__init__() with your database credentials

Usage:
    python example.py
"""

import logging
import time
from urllib.parse import parse_qs, urlsplit

from batcher import (
    Batcher,
    BatchReport,
    DatabaseConfiguration,
    EngineState,
    OperationResult,
    new_batcher_with_db,
)


def import_rows(offset: int, limit: int, context) -> OperationResult:
    """
    Import rows in chunks of 10.
    The operation is called again until all rows of its range are imported.
    """
    imported = context.sandbox.get("imported", 0)
    chunk = min(10, limit - imported)

    # Simulate some work
    time.sleep(0.05)
    imported += chunk

    if imported < limit:
        return OperationResult(
            finished=imported / limit,
            message=f"Imported {offset + imported} rows",
            sandbox_patch={"imported": imported},
        )

    return OperationResult(
        message=f"Imported rows {offset} to {offset + limit}",
        results_appended=[offset],
    )


def rebuild_index(name: str, context) -> OperationResult:
    """Rebuild one search index."""
    time.sleep(0.2)
    return OperationResult(results_appended=[name])


def report_import(success: bool, results, operations, elapsed: str) -> None:
    """Finished callback of the import set."""
    if success:
        logging.info(f"Imported {len(results)} ranges in {elapsed}")
    else:
        logging.error(f"Import failed, {len(operations)} operations left")


class BatcherExample:
    """Example demonstrating basic batcher usage with PostgreSQL."""

    def __init__(self):
        """Initialize the example with database configuration."""
        # Configure your PostgreSQL database connection
        self.db_config = DatabaseConfiguration(
            host="localhost",
            port=5432,
            username="your_username",
            password="your_password",
            database="your_database",
        )

    def run_example(self) -> BatchReport:
        """Submit a batch and poll it until it is finished."""
        b: Batcher = new_batcher_with_db(
            secret="example-secret",
            db_config=self.db_config,
            time_budget=0.5,
        )

        try:
            b.batch_set(
                [(import_rows, [offset, 50]) for offset in range(0, 200, 50)],
                title="Importing rows",
                progress_message="Completed @current of @total, @estimate left.",
                finished=report_import,
            )
            b.batch_set(
                [(rebuild_index, [name]) for name in ("rows", "authors")],
                title="Rebuilding indexes",
                init_message="Starting index rebuild.",
            )

            redirect = b.process(redirect="/imported", url="/batch")
            logging.info(f"Redirecting to {redirect.url}")
            batch_id = int(parse_qs(urlsplit(redirect.url).query)["id"][0])

            page = b.page("start", batch_id)
            logging.info(f"{page.title}: {page.init_message}")

            while True:
                progress = b.page("do", batch_id, "POST")
                logging.info(f"{progress.percentage}% {progress.message}")
                if b.state == EngineState.DONE:
                    break

            report = b.page("finished", batch_id)
            logging.info(
                f"Batch {report.batch_id} finished, success: {report.success}, "
                f"redirect: {report.redirect.url if report.redirect else None}"
            )
            return report
        finally:
            b.close()


def main():
    """Main function."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    example = BatcherExample()
    try:
        example.run_example()
    except Exception as e:
        logging.error(f"Error in example: {e}")


if __name__ == "__main__":
    main()

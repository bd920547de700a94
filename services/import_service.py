"""Bulk flashcard import from CSV files"""
import csv
import logging
import os
from dataclasses import dataclass, field
from typing import List

from repositories import user_repository
from repositories.unit_of_work import unit_of_work
from services import flashcard_service, log_service
from services.exceptions import ImportFileError, InputValidationError

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    imported: int = 0
    skipped: List[str] = field(default_factory=list)


def import_flashcards_from_file(user_id: int, path: str) -> ImportReport:
    """
    Import flashcards from a CSV file.

    The first row is a header that must name a ``question`` and an
    ``answer`` column (any case, surrounding whitespace ignored); other
    columns are ignored. Every following row becomes one flashcard.

    Example file:
        question,answer
        What is the capital of France?,Paris

    Args:
        user_id: Owner of the imported flashcards
        path: Path to the CSV file

    Returns:
        ImportReport with the number of imported flashcards and one message
        per skipped row (rows are numbered from 1, the header being row 1)

    Raises:
        ImportFileError: If the file or user is missing, or the header is unusable
    """
    if not os.path.isfile(path):
        raise ImportFileError(f'File not found: {path}')

    if user_repository.get_by_id(user_id) is None:
        raise ImportFileError(f'User not found with ID: {user_id}')

    report = ImportReport()

    try:
        with open(path, newline='', encoding='utf-8-sig') as csv_file:
            reader = csv.reader(csv_file)
            header = next(reader, None)

            if not header or len(header) < 2:
                raise ImportFileError('Invalid CSV format. Expected at least 2 columns (question, answer).')

            columns = [name.strip().lower() for name in header]
            if 'question' not in columns or 'answer' not in columns:
                raise ImportFileError("CSV must contain 'question' and 'answer' columns.")

            question_index = columns.index('question')
            answer_index = columns.index('answer')

            for row_number, row in enumerate(reader, start=2):
                if len(row) <= max(question_index, answer_index):
                    report.skipped.append(f'Skipping row {row_number}: Insufficient columns.')
                    continue

                question = row[question_index].strip()
                answer = row[answer_index].strip()
                if not question or not answer:
                    report.skipped.append(f'Skipping row {row_number}: Empty question or answer.')
                    continue

                try:
                    flashcard_service.create(user_id, question, answer)
                except InputValidationError as e:
                    report.skipped.append(f'Skipping row {row_number}: {" ".join(e.messages)}')
                    continue

                report.imported += 1
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ImportFileError(f'Could not read file {path}: {e}') from e

    with unit_of_work():
        log_service.log_flashcard_import(user_id, report.imported)

    logger.info(f'Imported {report.imported} flashcards for user {user_id}, skipped {len(report.skipped)} rows')
    return report

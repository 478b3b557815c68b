"""
Simulated plagiarism analysis.

Nothing is compared against any corpus: the "analysis" walks a fixed list of
timed steps while a separate ticker raises a progress percentage, then stores
a randomly generated score and a handful of placeholder sources.

The ticker and the step labels run on their own clocks. The ticker reaches 100
after 5 seconds while the last step only ends after 5.8 seconds, so a client
can show 100% next to "Generating report...". That is the expected behaviour.
"""
import logging
import random
import time

from django.db import IntegrityError, OperationalError, transaction
from django.utils import timezone

from .models import Document, PlagiarismResult

logger = logging.getLogger(__name__)

# (label, duration in milliseconds)
ANALYSIS_STEPS = (
    ('Uploading document...', 500),
    ('Extracting text...', 800),
    ('Analyzing content...', 1200),
    ('Searching for similar sources...', 1500),
    ('Computing plagiarism score...', 1000),
    ('Generating report...', 800),
)

PROGRESS_TICK_MS = 100
PROGRESS_STEP = 2
PROGRESS_MAX = 100

# Pause between completion and handing the user over to the dashboard.
COMPLETION_REDIRECT_DELAY_MS = 1500

SCORE_RANGE = (10, 40)          # [low, high)
SOURCES_COUNT_RANGE = (1, 5)    # inclusive
SOURCE_SIMILARITY_RANGE = (5, 25)
TOTAL_WORDS_RANGE = (500, 1500)
SOURCE_EXCERPT = 'Lorem ipsum dolor sit amet, consectetur adipiscing elit...'

# (label, predicate on progress)
MILESTONES = (
    ('Document uploaded', lambda progress: progress > 0),
    ('Content analyzed', lambda progress: progress > 30),
    ('Sources identified', lambda progress: progress > 60),
    ('Report generated', lambda progress: progress == PROGRESS_MAX),
)


def total_duration_ms(steps=ANALYSIS_STEPS):
    return sum(duration for _, duration in steps)


def progress_at(elapsed_ms):
    """Ticker value after `elapsed_ms`: +PROGRESS_STEP per tick, capped."""
    if elapsed_ms <= 0:
        return 0
    ticks = int(elapsed_ms // PROGRESS_TICK_MS)
    return min(ticks * PROGRESS_STEP, PROGRESS_MAX)


def step_index_at(elapsed_ms, steps=ANALYSIS_STEPS):
    """Index of the step being shown after `elapsed_ms` (last step once all elapsed)."""
    boundary = 0
    for index, (_, duration) in enumerate(steps):
        boundary += duration
        if elapsed_ms < boundary:
            return index
    return len(steps) - 1


def milestones_for(progress):
    return [{'label': label, 'done': reached(progress)} for label, reached in MILESTONES]


def generate_sources(count, rng):
    return [
        {
            'url': f'https://example.com/source-{i}',
            'title': f'Similar source {i}',
            'similarity': rng.randrange(*SOURCE_SIMILARITY_RANGE),
            'excerpt': SOURCE_EXCERPT,
        }
        for i in range(1, count + 1)
    ]


def generate_result(rng=None, now=None):
    """
    Draw the fields of a PlagiarismResult.

    Returns a dict with `plagiarism_score`, `sources_found` and `details`,
    ready to be passed to `PlagiarismResult.objects.create`.
    """
    rng = rng or random.Random()
    now = now or timezone.now()

    score = rng.randrange(*SCORE_RANGE)
    sources = generate_sources(rng.randint(*SOURCES_COUNT_RANGE), rng)
    return {
        'plagiarism_score': score,
        'sources_found': sources,
        'details': {
            'total_words': rng.randrange(*TOTAL_WORDS_RANGE),
            'unique_content': 100 - score,
            'analysis_date': now.isoformat(),
        },
    }


# Attempts at completing a document while the database is busy, and the base
# pause between them (seconds, grows linearly). SQLite reports concurrent
# writers as OperationalError instead of waiting on a row lock.
COMPLETION_ATTEMPTS = 10
COMPLETION_RETRY_DELAY = 0.05


def _store_result(document, rng, now):
    with transaction.atomic():
        locked = Document.objects.select_for_update().get(pk=document.pk)
        result = PlagiarismResult.objects.filter(document=locked).first()
        if result is None:
            result = PlagiarismResult.objects.create(document=locked, **generate_result(rng, now))
            logger.info("Stored result for document %s: score=%s, sources=%s",
                        locked.pk, result.plagiarism_score, result.sources_count)
        if locked.status != Document.STATUS_COMPLETED:
            locked.status = Document.STATUS_COMPLETED
            locked.save(update_fields=['status'])
    return locked, result


def complete_analysis(document, rng=None, now=None):
    """
    Mark the document completed and store its result.

    Safe to call repeatedly or concurrently. The one-to-one link rejects a
    second result; a caller that loses the race re-reads the stored one. A busy
    database is retried a few times before the error is raised.
    """
    for attempt in range(1, COMPLETION_ATTEMPTS + 1):
        try:
            locked, result = _store_result(document, rng, now)
            break
        except IntegrityError:
            # another caller stored the result first; the next pass reads it
            logger.info("Result for document %s already stored by another request", document.pk)
        except OperationalError as e:
            if attempt == COMPLETION_ATTEMPTS:
                raise
            logger.warning("Database busy while completing document %s (%s), retrying", document.pk, e)
            time.sleep(COMPLETION_RETRY_DELAY * attempt)
    else:
        raise OperationalError(f"Could not complete analysis of document {document.pk}")
    document.status = locked.status
    return result


def start_analysis(document, now=None):
    """Start the clock for `document` unless it is already running."""
    if document.analysis_started_at is None:
        document.analysis_started_at = now or timezone.now()
        document.save(update_fields=['analysis_started_at'])
    return document.analysis_started_at


class AnalysisTimeline:
    """Progress of a document's analysis, derived from the time since it started."""

    def __init__(self, document, steps=ANALYSIS_STEPS):
        self.document = document
        self.steps = steps

    def elapsed_ms(self, now):
        started = self.document.analysis_started_at
        if started is None:
            return 0
        return max(0, (now - started).total_seconds() * 1000)

    def snapshot(self, now=None, rng=None):
        now = now or timezone.now()
        start_analysis(self.document, now)
        elapsed = self.elapsed_ms(now)

        if not self.document.is_completed and elapsed >= total_duration_ms(self.steps):
            complete_analysis(self.document, rng=rng, now=now)

        if self.document.is_completed:
            progress = PROGRESS_MAX
            index = len(self.steps) - 1
        else:
            progress = progress_at(elapsed)
            index = step_index_at(elapsed, self.steps)

        return {
            'document_id': str(self.document.pk),
            'status': self.document.status,
            'progress': progress,
            'step_index': index,
            'step_count': len(self.steps),
            'current_step': self.steps[index][0],
            'milestones': milestones_for(progress),
            'redirect_after_ms': COMPLETION_REDIRECT_DELAY_MS if self.document.is_completed else None,
        }


class AnalysisSimulator:
    """Runs the step sequence in real time, then completes the document."""

    def __init__(self, document, steps=ANALYSIS_STEPS, sleep=time.sleep):
        self.document = document
        self.steps = steps
        self.sleep = sleep

    def run(self, on_step=None, rng=None):
        start_analysis(self.document)
        for index, (label, duration) in enumerate(self.steps):
            if on_step is not None:
                on_step(index, label)
            self.sleep(duration / 1000)
        return complete_analysis(self.document, rng=rng)

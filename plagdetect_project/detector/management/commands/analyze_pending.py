from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from detector.analysis import AnalysisSimulator
from detector.models import Document


def _no_sleep(seconds):
    return None


class Command(BaseCommand):
    help = 'Run the analysis sequence for pending documents and store their results'

    def add_arguments(self, parser):
        parser.add_argument('--document', help='Only analyze the document with this id')
        parser.add_argument('--no-delay', action='store_true', help='Skip the pauses between steps')

    def handle(self, *args, **options):
        documents = Document.objects.filter(status=Document.STATUS_PENDING).order_by('created_at')
        if options['document']:
            try:
                documents = documents.filter(pk=options['document'])
                found = documents.exists()
            except ValidationError:
                found = False
            if not found:
                raise CommandError(f"No pending document with id {options['document']}")

        count = 0
        for document in documents:
            self.stdout.write(f"Analyzing {document.filename} ({document.pk})")
            simulator = AnalysisSimulator(document)
            if options['no_delay']:
                simulator.sleep = _no_sleep
            result = simulator.run(on_step=self._print_step)
            self.stdout.write(
                self.style.SUCCESS(f"  Score: {result.plagiarism_score}%, sources: {result.sources_count}")
            )
            count += 1

        self.stdout.write(f"{count} document(s) analyzed")

    def _print_step(self, index, label):
        self.stdout.write(f"  [{index + 1}] {label}")

"""
Tests for the HTML screens: auth, upload, analysis and dashboard.
"""
from datetime import timedelta
from unittest import mock

from django.contrib.auth.models import User
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from detector.extraction import ExtractionError
from detector.models import Document, PlagiarismResult
from detector.scoring import score_tier
from detector.uploads import NOT_A_PDF_MESSAGE


class AuthFlowTests(TestCase):
    def test_root_redirects_anonymous_users_to_login(self):
        response = self.client.get('/')
        self.assertRedirects(response, reverse('dashboard:login'))

    def test_root_redirects_signed_in_users_to_upload(self):
        user = User.objects.create_user('alice', 'alice@example.com', 'pw-alice-123')
        self.client.force_login(user)
        response = self.client.get('/')
        self.assertRedirects(response, reverse('dashboard:upload'))

    def test_screens_require_login(self):
        for url in (reverse('dashboard:home'), reverse('dashboard:upload')):
            response = self.client.get(url)
            self.assertEqual(response.status_code, 302)
            self.assertTrue(response['Location'].startswith(reverse('dashboard:login')))

    def test_signup_creates_account_and_signs_in(self):
        response = self.client.post(reverse('dashboard:signup'), {
            'email': 'new@example.com',
            'username': 'newcomer',
            'password1': 'Xq7!uploadPass',
            'password2': 'Xq7!uploadPass',
        })

        self.assertRedirects(response, reverse('dashboard:upload'))
        user = User.objects.get(username='newcomer')
        self.assertEqual(user.email, 'new@example.com')
        self.assertEqual(int(self.client.session['_auth_user_id']), user.pk)

    def test_signup_rejects_duplicate_email(self):
        User.objects.create_user('alice', 'alice@example.com', 'pw-alice-123')
        response = self.client.post(reverse('dashboard:signup'), {
            'email': 'alice@example.com',
            'username': 'alice2',
            'password1': 'Xq7!uploadPass',
            'password2': 'Xq7!uploadPass',
        })

        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(username='alice2').exists())

    def test_login_and_logout(self):
        User.objects.create_user('bob', 'bob@example.com', 'pw-bob-123')
        response = self.client.post(reverse('dashboard:login'), {'username': 'bob', 'password': 'pw-bob-123'})
        self.assertRedirects(response, reverse('dashboard:upload'))

        response = self.client.post(reverse('dashboard:logout'))
        self.assertRedirects(response, reverse('dashboard:login'))
        self.assertNotIn('_auth_user_id', self.client.session)


class UploadViewTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user('carol', 'carol@example.com', 'pw-carol-123')

    def setUp(self):
        self.client.force_login(self.user)
        self.url = reverse('dashboard:upload')

    def test_get(self):
        response = self.client.get(self.url)
        self.assertContains(response, 'Analyze document')

    def test_non_pdf_shows_rejection_and_stores_nothing(self):
        upload = SimpleUploadedFile('notes.docx', b'not a pdf', content_type='application/msword')
        response = self.client.post(self.url, {'file': upload})

        self.assertContains(response, NOT_A_PDF_MESSAGE, status_code=400)
        self.assertEqual(Document.objects.count(), 0)

    def test_no_file_shows_rejection(self):
        response = self.client.post(self.url, {})

        self.assertContains(response, NOT_A_PDF_MESSAGE, status_code=400)
        self.assertEqual(Document.objects.count(), 0)

    @mock.patch('detector.uploads.extract_text_from_pdf', side_effect=ExtractionError('Invalid PDF structure'))
    def test_extraction_failure_message_is_shown(self, extract):
        upload = SimpleUploadedFile('essay.pdf', b'%PDF-1.4', content_type='application/pdf')
        response = self.client.post(self.url, {'file': upload})

        self.assertContains(response, 'Invalid PDF structure', status_code=400)
        self.assertEqual(Document.objects.count(), 0)

    @mock.patch('detector.uploads.extract_text_from_pdf', return_value='Essay text')
    def test_success_redirects_to_analysis(self, extract):
        upload = SimpleUploadedFile('essay.pdf', b'%PDF-1.4', content_type='application/pdf')
        response = self.client.post(self.url, {'file': upload})

        document = Document.objects.get()
        self.assertRedirects(response, reverse('dashboard:analysis', args=[document.id]))
        self.assertEqual(document.status, Document.STATUS_PENDING)


class AnalysisViewTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user('dave', 'dave@example.com', 'pw-dave-123')
        cls.other = User.objects.create_user('eve', 'eve@example.com', 'pw-eve-123')

    def setUp(self):
        self.client.force_login(self.user)

    def test_renders_progress_and_starts_clock(self):
        document = Document.objects.create(user=self.user, filename='essay.pdf', file_size=1)
        response = self.client.get(reverse('dashboard:analysis', args=[document.id]))

        self.assertContains(response, 'Analysis in progress')
        self.assertContains(response, 'Uploading document...')
        self.assertContains(response, reverse('detector:analysis_progress', args=[document.id]))
        document.refresh_from_db()
        self.assertIsNotNone(document.analysis_started_at)

    def test_finished_analysis(self):
        document = Document.objects.create(
            user=self.user, filename='essay.pdf', file_size=1,
            analysis_started_at=timezone.now() - timedelta(minutes=1),
        )
        response = self.client.get(reverse('dashboard:analysis', args=[document.id]))

        self.assertContains(response, 'Analysis complete')
        self.assertEqual(PlagiarismResult.objects.filter(document=document).count(), 1)

    def test_page_knows_where_to_send_expired_sessions(self):
        document = Document.objects.create(user=self.user, filename='essay.pdf', file_size=1)
        response = self.client.get(reverse('dashboard:analysis', args=[document.id]))

        self.assertContains(response, f'data-login-url="{reverse("dashboard:login")}"')
        self.assertContains(response, 'id="progress-error"')
        self.assertContains(response, 'response.ok')

        # what the polling script sees once the session is gone
        self.client.logout()
        response = self.client.get(reverse('detector:analysis_progress', args=[document.id]))
        self.assertEqual(response.status_code, 403)

    def test_other_users_document(self):
        document = Document.objects.create(user=self.other, filename='theirs.pdf', file_size=1)
        response = self.client.get(reverse('dashboard:analysis', args=[document.id]))
        self.assertEqual(response.status_code, 404)


class DashboardViewTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user('frank', 'frank@example.com', 'pw-frank-123')
        cls.older = Document.objects.create(user=cls.user, filename='older.pdf', file_size=1, status='completed')
        cls.newer = Document.objects.create(user=cls.user, filename='newer.pdf', file_size=1, status='completed')
        Document.objects.filter(pk=cls.older.pk).update(created_at=timezone.now() - timedelta(days=2))
        PlagiarismResult.objects.create(
            document=cls.newer,
            plagiarism_score=12,
            sources_found=[{
                'url': 'https://example.com/source-1',
                'title': 'Similar source 1',
                'similarity': 9,
                'excerpt': 'Lorem ipsum dolor sit amet, consectetur adipiscing elit...',
            }],
            details={'total_words': 800, 'unique_content': 88, 'analysis_date': '2024-01-01T00:00:00+00:00'},
        )
        PlagiarismResult.objects.create(
            document=cls.older,
            plagiarism_score=35,
            sources_found=[],
            details={'total_words': 600, 'unique_content': 65, 'analysis_date': '2024-01-01T00:00:00+00:00'},
        )

    def setUp(self):
        self.client.force_login(self.user)

    def test_newest_document_selected_by_default(self):
        response = self.client.get(reverse('dashboard:home'))

        self.assertEqual(response.context['documents'], [self.newer, self.older])
        self.assertEqual(response.context['selected_document'], self.newer)
        self.assertContains(response, 'Excellent')
        self.assertContains(response, '88%')
        self.assertContains(response, 'Similar source 1')
        self.assertContains(response, 'https://example.com/source-1')

    def test_select_document(self):
        response = self.client.get(reverse('dashboard:home'), {'document': str(self.older.id)})

        self.assertEqual(response.context['selected_document'], self.older)
        self.assertEqual(response.context['tier'], score_tier(35))
        self.assertContains(response, 'Attention')

    def test_no_documents(self):
        other = User.objects.create_user('gina', 'gina@example.com', 'pw-gina-123')
        self.client.force_login(other)
        response = self.client.get(reverse('dashboard:home'))

        self.assertContains(response, 'No documents analyzed yet')
        self.assertContains(response, 'Select a document')


class ScoreTierTests(TestCase):
    def test_buckets(self):
        self.assertEqual(score_tier(0).label, 'Excellent')
        self.assertEqual(score_tier(14).color, 'green')
        self.assertEqual(score_tier(15).label, 'Acceptable')
        self.assertEqual(score_tier(29).color, 'orange')
        self.assertEqual(score_tier(30).label, 'Attention')
        self.assertEqual(score_tier(100).color, 'red')

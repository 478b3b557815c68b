import logging

from django.contrib import messages
from django.contrib.auth import login, logout
from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib.auth.views import LoginView
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views import View
from django.views.generic import CreateView, TemplateView

from detector.analysis import AnalysisTimeline
from detector.models import Document, PlagiarismResult
from detector.scoring import score_tier
from detector.uploads import UploadError, create_document
from .forms import DocumentUploadForm, SignUpForm

logger = logging.getLogger(__name__)


class DashboardLoginView(LoginView):
    template_name = "dashboard/login.html"
    redirect_authenticated_user = True


class CustomLogoutView(View):
    """Logs out on GET or POST and returns to the login page"""

    def get(self, request):
        return self.logout_user(request)

    def post(self, request):
        return self.logout_user(request)

    def logout_user(self, request):
        if request.user.is_authenticated:
            logout(request)
            messages.success(request, 'You have been logged out successfully.')
        return redirect('dashboard:login')


class SignUpView(CreateView):
    form_class = SignUpForm
    template_name = "dashboard/signup.html"

    def form_valid(self, form):
        user = form.save()
        login(self.request, user)
        logger.info("New account %s", user.username)
        messages.success(self.request, 'Account created. You can upload your first document.')
        return redirect('dashboard:upload')

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            return redirect('dashboard:upload')
        return super().dispatch(request, *args, **kwargs)


class UploadView(LoginRequiredMixin, View):
    template_name = "dashboard/upload.html"

    def get(self, request):
        return render(request, self.template_name, {'form': DocumentUploadForm()})

    def post(self, request):
        form = DocumentUploadForm(request.POST, request.FILES)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form}, status=400)

        try:
            document = create_document(request.user, form.cleaned_data['file'])
        except UploadError as e:
            form.add_error(None, e.message)
            return render(request, self.template_name, {'form': form}, status=e.status_code)

        return redirect('dashboard:analysis', document_id=document.id)


class AnalysisView(LoginRequiredMixin, TemplateView):
    """Progress screen shown while the (simulated) analysis runs."""
    template_name = "dashboard/analysis.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        document = Document.objects.filter(id=kwargs['document_id'], user=self.request.user).first()
        if document is None:
            raise Http404("Document not found")

        context.update({
            'document': document,
            'snapshot': AnalysisTimeline(document).snapshot(),
            'progress_url': reverse('detector:analysis_progress', args=[document.id]),
            'dashboard_url': reverse('dashboard:home') + f'?document={document.id}',
            'login_url': reverse('dashboard:login'),
        })
        return context


class DashboardHomeView(LoginRequiredMixin, TemplateView):
    """Documents of the current user and the result of the selected one."""
    template_name = "dashboard/dashboard.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        documents = list(Document.objects.filter(user=self.request.user).order_by('-created_at'))

        selected = None
        requested = self.request.GET.get('document')
        if requested:
            selected = next((d for d in documents if str(d.id) == requested), None)
        if selected is None and documents:
            selected = documents[0]

        result = None
        if selected is not None:
            result = PlagiarismResult.objects.filter(document=selected).first()

        context.update({
            'documents': documents,
            'selected_document': selected,
            'result': result,
            'tier': score_tier(result.plagiarism_score) if result else None,
        })
        return context

from django.urls import path

from server.apps.languages import views

app_name = 'languages'

urlpatterns = [
    path('languages', views.languages, name='languages'),
    path(
        'languages/<int:language_id>',
        views.language_detail,
        name='language_detail',
    ),
]

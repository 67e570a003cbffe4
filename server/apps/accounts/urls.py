from django.urls import path

from server.apps.accounts import views

app_name = 'accounts'

urlpatterns = [
    path('register', views.register, name='register'),
    path('login', views.login, name='login'),
    path('logout', views.logout, name='logout'),
    path('getsession', views.get_current_session, name='getsession'),
    path('allusers', views.all_users, name='allusers'),
    path('users/<int:user_id>', views.user_detail, name='user_detail'),
    path('myProfile', views.my_profile, name='my_profile'),
    path('myPassword', views.my_password, name='my_password'),
    path('deleteMyAccount', views.delete_my_account, name='delete_my_account'),
    path('deleteUser/<int:user_id>', views.delete_user, name='delete_user'),
    path('deleteAllUsers', views.delete_all_users, name='delete_all_users'),
    path('getAllSessions', views.all_sessions, name='all_sessions'),
    path(
        'getSessionByUserId/<int:user_id>',
        views.sessions_by_user,
        name='sessions_by_user',
    ),
    path(
        'revokeSession/<int:session_id>',
        views.revoke_session,
        name='revoke_session',
    ),
]

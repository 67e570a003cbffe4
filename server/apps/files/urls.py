from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('upload', views.upload, name='upload'),
    path('myfiles', views.my_files, name='my_files'),
    path('allFiles', views.all_files, name='all_files'),
    path('userFiles/<int:user_id>', views.user_files, name='user_files'),
    path('files/<int:file_id>', views.file_detail, name='file_detail'),
    path('updateFile/<int:file_id>', views.update_file, name='update_file'),
    path('deleteFile/<int:file_id>', views.delete_file, name='delete_file'),
    path('deleteMyFiles', views.delete_my_files, name='delete_my_files'),
    path('deleteAllFiles', views.delete_all_files, name='delete_all_files'),
    path(
        'deleteUserFiles/<int:user_id>',
        views.delete_user_files,
        name='delete_user_files',
    ),
    path('download/<int:file_id>', views.download, name='download'),
]

from django.apps import AppConfig


class DentalConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'dental'
    verbose_name = 'SD Dental'

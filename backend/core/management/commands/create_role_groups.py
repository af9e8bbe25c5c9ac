from django.core.management.base import BaseCommand
from django.contrib.auth.models import Group, Permission

APP_LABELS = [
    'core', 'parties', 'employees', 'inventory', 'orders',
    'purchasing', 'communications', 'documents',
]


class Command(BaseCommand):
    help = 'Create one Django group per shop-floor role: Admin, Manager, Cutter, Stitcher, Presser, Delivery'

    def handle(self, *args, **options):
        groups_config = [
            {'name': 'Admin', 'role': 'ADMIN', 'scope': 'all'},
            {'name': 'Manager', 'role': 'MANAGER', 'scope': 'modules'},
            {'name': 'Cutter', 'role': 'CUTTER', 'apps': ['orders', 'inventory']},
            {'name': 'Stitcher', 'role': 'STITCHER', 'apps': ['orders']},
            {'name': 'Presser', 'role': 'PRESSER', 'apps': ['orders']},
            {'name': 'Delivery', 'role': 'DELIVERY', 'apps': ['orders']},
        ]

        created_count = 0
        existing_count = 0

        for group_config in groups_config:
            group, created = Group.objects.get_or_create(name=group_config['name'])

            if created:
                self.stdout.write(self.style.SUCCESS(f'✓ Created group: {group_config["name"]}'))
                created_count += 1
            else:
                self.stdout.write(f'  Group already exists: {group_config["name"]}')
                existing_count += 1

            scope = group_config.get('scope')
            if scope == 'all':
                group.permissions.set(Permission.objects.all())
                self.stdout.write('  Added all permissions to Admin group')
            elif scope == 'modules':
                # Everything in the business apps, but no user management
                group.permissions.set(Permission.objects.filter(content_type__app_label__in=APP_LABELS).exclude(
                    content_type__app_label='core',
                    codename__in=['add_user', 'change_user', 'delete_user'],
                ))
                self.stdout.write(f'  Added module permissions to {group_config["name"]} group')
            else:
                # Production staff read their apps and change tasks
                permissions = Permission.objects.filter(
                    content_type__app_label__in=group_config['apps'],
                    codename__startswith='view_',
                ) | Permission.objects.filter(content_type__app_label='orders', codename='change_task')
                group.permissions.set(permissions)
                self.stdout.write(f'  View permissions set for {group_config["name"]} group')

        self.stdout.write(self.style.SUCCESS(
            f'\nCompleted: {created_count} groups created, {existing_count} groups already existed'
        ))

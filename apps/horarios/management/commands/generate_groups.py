"""
Management command to create the groups of a cycle from professors' class lists
Usage: python manage.py generate_groups --cycle 3 [--replace] [--strategy least_loaded]
"""

from django.core.management.base import BaseCommand, CommandError
from tabulate import tabulate

from apps.horarios.exceptions import GroupValidationFailed
from apps.horarios.scheduling.classroom import STRATEGIES
from apps.horarios.services.group_generator import GroupGenerator


class Command(BaseCommand):
    help = 'Create one group per subject each professor teaches in a cycle'

    def add_arguments(self, parser):
        parser.add_argument(
            '--cycle',
            type=int,
            required=True,
            help='Cycle id'
        )
        parser.add_argument(
            '--replace',
            action='store_true',
            help="Delete the cycle's existing groups first"
        )
        parser.add_argument(
            '--strategy',
            choices=sorted(STRATEGIES),
            help='Classroom assignment strategy (default from settings)'
        )

    def handle(self, *args, **options):
        cycle_id = options['cycle']
        generator = GroupGenerator(classroom_strategy=options.get('strategy'))

        try:
            result = generator.generate_for_all_professors(cycle_id, replace=options['replace'])
        except GroupValidationFailed as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(
            f"✅ {len(result['created'])} groups created for cycle {cycle_id}"
        ))
        if result['errors']:
            self.stdout.write(self.style.WARNING(f"\n⚠️ {len(result['errors'])} problems:"))
            self.stdout.write(tabulate(
                [[e['professor_id'], e['error']] for e in result['errors']],
                headers=['Professor', 'Problem'],
                tablefmt='grid'
            ))

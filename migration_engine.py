"""
Migration engine that copies the catalog of one channel onto another
"""
import json
import os
from datetime import datetime
from tqdm import tqdm
from bigcommerce_client import BigCommerceClient
from data_mapper import DataMapper, chunked
from logger import setup_logger, SUCCESS, LOGS_DIR

# Tree id used in place of a real one while nothing is written
DRY_RUN_TREE_ID = 0


class MigrationEngine:
    def __init__(self, config, client=None):
        self.config = config
        self.logger = setup_logger("migration_engine", config.log_level)
        self.client = client or BigCommerceClient.from_config(config)
        self.dry_run = config.dry_run
        self.migration_report = {
            'start_time': None,
            'end_time': None,
            'mode': 'dry_run' if self.dry_run else 'live',
            'source_tree_id': config.source_tree_id,
            'target_channel_id': config.channel_id,
            'new_tree_id': None,
            'categories': {'fetched': 0, 'created': 0},
            'product_category_assignments': {'fetched': 0, 'written': 0},
            'product_channel_assignments': {'fetched': 0, 'written': 0},
            'errors': []
        }

    def log(self, message, level='INFO'):
        """Log a progress line"""
        if self.dry_run and level in ('INFO', 'SUCCESS'):
            message = f"[DRY RUN] {message}"

        if level == 'INFO':
            self.logger.info(message)
        elif level == 'SUCCESS':
            self.logger.log(SUCCESS, message)
        elif level == 'ERROR':
            self.logger.error(message)
        elif level == 'WARNING':
            self.logger.warning(message)
        elif level == 'DEBUG':
            self.logger.debug(message)

    def run_migration(self):
        """Run every migration step in order

        Any error aborts the run. Remote changes made by earlier steps are
        left in place; the saved report names the new tree for cleanup.
        """
        self.migration_report['start_time'] = datetime.now()
        mode_text = "DRY RUN" if self.dry_run else "LIVE MIGRATION"
        self.log(f"Starting {mode_text} to channel {self.config.channel_id}")

        try:
            categories = self._fetch_source_categories()
            old_id_to_name = DataMapper.build_category_name_map(categories)

            new_tree_id = self._create_category_tree()
            created_categories = self._create_categories(categories, new_tree_id)
            name_to_new_id = DataMapper.build_created_category_map(created_categories)

            self._migrate_product_category_assignments(
                list(old_id_to_name), old_id_to_name, name_to_new_id
            )
            self._migrate_product_channel_assignments()
        except Exception as e:
            self.log(f"Migration failed: {e}", 'ERROR')
            self.migration_report['errors'].append(str(e))
            self._finalize_migration_report()
            raise

        return self._finalize_migration_report()

    def _fetch_source_categories(self):
        tree_id = self.config.source_tree_id
        self.log(f"Fetching categories for tree id {tree_id}")
        categories = self.client.get_categories_by_tree_ids([tree_id])
        self.migration_report['categories']['fetched'] = len(categories)
        self.log(f"Categories fetched successfully ({len(categories)})", 'SUCCESS')
        return categories

    def _create_category_tree(self):
        self.log("Creating new category tree")
        if self.dry_run:
            self.log(f"Would create category tree '{self.config.tree_name}' for channel {self.config.channel_id}")
            return DRY_RUN_TREE_ID

        new_tree_id = self.client.create_category_tree(self.config.tree_name, self.config.channel_id)
        self.migration_report['new_tree_id'] = new_tree_id
        self.log(f"New category tree created successfully (id {new_tree_id})", 'SUCCESS')
        return new_tree_id

    def _create_categories(self, categories, new_tree_id):
        self.log("Building categories for new tree")
        categories_for_new_tree = DataMapper.build_categories_for_new_tree(categories, new_tree_id)
        self.log("Categories built successfully", 'SUCCESS')

        self.log("Creating categories for new tree")
        if self.dry_run:
            self.log(f"Would create {len(categories_for_new_tree)} categories")
            # The source categories stand in for the ones that would be created
            return categories

        created = []
        for batch in self._batches(categories_for_new_tree, "Creating categories"):
            created.extend(self.client.create_categories(batch))
            self.migration_report['categories']['created'] = len(created)
        self.log(f"Categories created successfully ({len(created)})", 'SUCCESS')
        return created

    def _migrate_product_category_assignments(self, category_ids, old_id_to_name, name_to_new_id):
        self.log("Fetching product category assignments...")
        assignments = []
        for id_batch in chunked(category_ids, self.config.batch_size):
            assignments.extend(self.client.get_product_category_assignments_for_category_ids(id_batch))
        self.migration_report['product_category_assignments']['fetched'] = len(assignments)
        self.log(f"Product category assignments fetched successfully ({len(assignments)})", 'SUCCESS')

        self.log("Building product category assignments for new categories...")
        remapped = DataMapper.build_product_category_assignments_for_new_categories(
            assignments, old_id_to_name, name_to_new_id
        )
        self.log("Built product category assignments", 'SUCCESS')

        self.log("Creating product category assignments...")
        if self.dry_run:
            self.log(f"Would write {len(remapped)} product category assignments")
            return

        for batch in self._batches(remapped, "Assigning categories"):
            self.client.create_product_category_assignments(batch)
            self.migration_report['product_category_assignments']['written'] += len(batch)
        self.log("Created product category assignments", 'SUCCESS')

    def _migrate_product_channel_assignments(self):
        source_channel_id = self.config.source_channel_id
        if source_channel_id:
            self.log(f"Fetching product channel assignments for channel {source_channel_id}...")
            assignments = self.client.get_product_channel_assignments([source_channel_id])
        else:
            self.log("Fetching product channel assignments for all channels...")
            assignments = self.client.get_product_channel_assignments()
        self.migration_report['product_channel_assignments']['fetched'] = len(assignments)
        self.log(f"Product channel assignments fetched successfully ({len(assignments)})", 'SUCCESS')

        self.log("Building product channel assignments for new channel...")
        rewritten = DataMapper.build_product_channel_assignments_for_new_channel(
            assignments, self.config.channel_id
        )
        self.log("Built product channel assignments", 'SUCCESS')

        self.log("Creating product channel assignments...")
        if self.dry_run:
            self.log(f"Would write {len(rewritten)} product channel assignments")
            return

        for batch in self._batches(rewritten, "Assigning channel"):
            self.client.create_product_channel_assignments(batch)
            self.migration_report['product_channel_assignments']['written'] += len(batch)
        self.log("Created product channel assignments", 'SUCCESS')

    def _batches(self, items, desc):
        batches = chunked(items, self.config.batch_size)
        return tqdm(batches, desc=desc, unit="batch", disable=len(batches) < 2)

    def _finalize_migration_report(self):
        self.migration_report['end_time'] = datetime.now()
        self._generate_migration_report()
        return {
            'success': not self.migration_report['errors'],
            'report': self.migration_report
        }

    def _generate_migration_report(self):
        """Log a summary and save the report"""
        report = self.migration_report
        mode = "DRY RUN" if self.dry_run else "MIGRATION"
        duration = (report['end_time'] - report['start_time']).total_seconds()

        self.logger.info(f"=== {mode} REPORT ===")
        self.logger.info(f"Duration: {duration:.2f} seconds")
        if report['new_tree_id'] is not None:
            self.logger.info(f"New category tree: {report['new_tree_id']}")
        for step in ('categories', 'product_category_assignments', 'product_channel_assignments'):
            stats = ', '.join(f"{key} {value}" for key, value in report[step].items())
            self.logger.info(f"{step.upper()}: {stats}")
        if report['errors']:
            self.logger.error(f"Errors: {len(report['errors'])}")

        report_file = os.path.join(
            LOGS_DIR,
            f"migration_report_{report['mode']}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        )
        try:
            os.makedirs(LOGS_DIR, exist_ok=True)
            with open(report_file, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2, default=str)
        except OSError as e:
            self.logger.error(f"Failed to save report to {report_file}: {e}")
            return None
        self.logger.info(f"Report saved to: {report_file}")
        return report_file

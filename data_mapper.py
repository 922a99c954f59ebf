"""
Data mapping functions to reshape catalog records for the target channel
"""
from exceptions import DuplicateCategoryNameError, ReferenceIntegrityError
from logger import setup_logger

logger = setup_logger(__name__)


def chunked(items, size):
    """Split a list into consecutive chunks of at most size items"""
    return [items[i:i + size] for i in range(0, len(items), size)]


class DataMapper:

    @staticmethod
    def build_categories_for_new_tree(categories, new_tree_id):
        """Project source categories onto a new tree

        Only name and sort_order are carried over; the API assigns fresh
        category ids on creation.
        """
        return [
            {
                'name': category['name'],
                'sort_order': category['sort_order'],
                'tree_id': new_tree_id,
            }
            for category in categories
        ]

    @staticmethod
    def build_category_name_map(categories):
        """Map old category id -> name

        Raises:
            DuplicateCategoryNameError: if two categories share a name
        """
        id_to_name = {}
        seen = {}
        for category in categories:
            name = category['name']
            if name in seen:
                raise DuplicateCategoryNameError(
                    f"Category name {name!r} is used by category IDs {seen[name]} and {category['category_id']}"
                )
            seen[name] = category['category_id']
            id_to_name[category['category_id']] = name
        return id_to_name

    @staticmethod
    def build_created_category_map(created_categories):
        """Map category name -> new category id"""
        name_to_id = {}
        for category in created_categories:
            name = category['name']
            if name in name_to_id:
                raise DuplicateCategoryNameError(
                    f"Created category name {name!r} is used by category IDs {name_to_id[name]} and {category['category_id']}"
                )
            name_to_id[name] = category['category_id']
        return name_to_id

    @staticmethod
    def build_product_category_assignments_for_new_categories(assignments, old_id_to_name, name_to_new_id):
        """Re-point product category assignments at the newly created categories

        The old category id is translated through its name. Any assignment
        that cannot be translated aborts the whole mapping.

        Args:
            assignments: list of {product_id, category_id} on the source tree
            old_id_to_name: old category id -> name
            name_to_new_id: name -> new category id

        Returns:
            list of {product_id, category_id} on the new tree
        """
        remapped = []
        for assignment in assignments:
            category_name = old_id_to_name.get(assignment['category_id'])
            if category_name is None:
                raise ReferenceIntegrityError(
                    f"Source category name not found for category ID {assignment['category_id']}"
                )

            new_category_id = name_to_new_id.get(category_name)
            if new_category_id is None:
                raise ReferenceIntegrityError(
                    f"New category ID not found for category name {category_name}"
                )

            remapped.append({
                'product_id': assignment['product_id'],
                'category_id': new_category_id,
            })

        logger.debug(f"Remapped {len(remapped)} product category assignments")
        return remapped

    @staticmethod
    def build_product_channel_assignments_for_new_channel(assignments, channel_id):
        """Assign every product to channel_id, discarding the original channel

        A product listed under several channels yields a single assignment.
        """
        rewritten = []
        seen = set()
        for assignment in assignments:
            product_id = assignment['product_id']
            if product_id in seen:
                continue
            seen.add(product_id)
            rewritten.append({
                'product_id': product_id,
                'channel_id': channel_id,
            })
        return rewritten

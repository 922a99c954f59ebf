import json
import time
import requests
from exceptions import MigrationError
from logger import setup_logger

logger = setup_logger(__name__)


def _join_ids(ids):
    return ','.join(str(i) for i in ids)


class BigCommerceClient:
    def __init__(self, api_origin, store_hash, access_token, max_retries=3, page_limit=250, session=None):
        self.api_origin = api_origin.rstrip('/')
        self.store_hash = store_hash
        self.access_token = access_token
        self.max_retries = max_retries
        self.page_limit = page_limit
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            config.api_origin,
            config.store_hash,
            config.access_token,
            max_retries=config.max_retries,
            page_limit=config.page_limit
        )

    def build_url(self, path):
        return f"{self.api_origin}/stores/{self.store_hash}{path}"

    def request(self, path, method='GET', body=None, headers=None, params=None):
        """Issue a single request against the store and return the raw response

        Caller supplied headers are applied after the defaults, so they win
        on collision. The body is JSON encoded.
        """
        request_headers = {
            'accept': 'application/json',
            'content-type': 'application/json',
            'x-auth-token': self.access_token,
        }
        if headers:
            request_headers.update(headers)

        data = json.dumps(body) if body is not None else None

        return self.session.request(
            method,
            self.build_url(path),
            headers=request_headers,
            data=data,
            params=params
        )

    def _make_request(self, method, path, body=None, params=None):
        """Make API request, waiting out rate limits, and return parsed JSON"""
        for attempt in range(self.max_retries):
            response = self.request(path, method=method, body=body, params=params)

            # Handle rate limiting
            if response.status_code == 429 and attempt < self.max_retries - 1:
                reset_ms = int(response.headers.get('X-Rate-Limit-Time-Reset-Ms', 1000))
                logger.warning(f"Rate limited. Waiting {reset_ms / 1000:.1f} seconds...")
                time.sleep(reset_ms / 1000)
                continue

            if not response.ok:
                logger.error(f"{method} {path} failed: {response.status_code} - {response.text[:500]}")
            response.raise_for_status()
            return response.json() if response.content else None

    def iter_pages(self, path, params=None):
        """Yield the data list of each page of a paginated collection

        The generator follows meta.pagination until the last page. Without
        pagination meta, a short page is the last one.
        """
        page = 1
        while True:
            page_params = dict(params or {})
            page_params.update({'limit': self.page_limit, 'page': page})

            result = self._make_request('GET', path, params=page_params) or {}
            items = result.get('data') or []
            if not items:
                return

            yield items

            pagination = result.get('meta', {}).get('pagination')
            if not pagination:
                if len(items) < self.page_limit:
                    return
                logger.warning(f"Full page from {path} without pagination meta, requesting page {page + 1}")
                page += 1
                continue
            if pagination.get('current_page', page) >= pagination.get('total_pages', page):
                return
            page += 1

    def get_all(self, path, params=None):
        """Get all items from a paginated endpoint"""
        all_data = []
        for items in self.iter_pages(path, params):
            all_data.extend(items)
            logger.debug(f"Retrieved {len(items)} items from {path}, total: {len(all_data)}")
        return all_data

    def create_category_tree(self, name, channel_id):
        """Create a category tree for one channel and return its id"""
        response = self._make_request('PUT', '/v3/catalog/trees', body=[
            {
                'name': name,
                'channels': [channel_id],
            }
        ])
        trees = (response or {}).get('data') or []
        if not trees:
            raise MigrationError("Category tree creation returned no data")
        return trees[0]['id']

    def get_categories_by_tree_ids(self, tree_ids):
        return self.get_all('/v3/catalog/trees/categories', params={'tree_id:in': _join_ids(tree_ids)})

    def create_categories(self, categories):
        """Create categories and return them with their new ids"""
        response = self._make_request('POST', '/v3/catalog/trees/categories', body=categories)
        return (response or {}).get('data') or []

    def get_product_category_assignments_for_category_ids(self, category_ids):
        return self.get_all(
            '/v3/catalog/products/category-assignments',
            params={'category_id:in': _join_ids(category_ids)}
        )

    def create_product_category_assignments(self, assignments):
        self._make_request('PUT', '/v3/catalog/products/category-assignments', body=assignments)

    def get_product_channel_assignments(self, channel_ids=None):
        """Get product channel assignments, store-wide unless channel_ids is given"""
        params = {'channel_id:in': _join_ids(channel_ids)} if channel_ids else None
        return self.get_all('/v3/catalog/products/channel-assignments', params=params)

    def create_product_channel_assignments(self, assignments):
        self._make_request('PUT', '/v3/catalog/products/channel-assignments', body=assignments)

    def test_connection(self):
        """Test the connection and catalog scope of the access token"""
        try:
            self._make_request('GET', '/v3/catalog/trees', params={'limit': 1})
            logger.info(f"Successfully connected to BigCommerce store: {self.store_hash}")
            return True
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to connect to BigCommerce: {e}")
            return False

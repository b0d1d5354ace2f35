"""Repository layer for the Reachbase template library.

Provides CRUD, filtered listing and relation methods:
- templates: create_template, get_template, list_templates, update_template,
             delete_template, duplicate_template, add_favorite, remove_favorite,
             get_template_performance, get_top_performers
- snippets: create_snippet, list_snippets, update_snippet, delete_snippet
- template_collections: create_collection, list_collections,
                        add_template_to_collection, remove_template_from_collection
- template_filters: build_conditions, order_by_clause (list query building)
"""

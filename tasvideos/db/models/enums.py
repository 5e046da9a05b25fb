from __future__ import annotations

import enum


class PermissionTo(enum.IntEnum):
    """
    Capabilities that can be granted to a role.

    Values are persisted in role_permissions.permission_id, so existing
    numbers must never be reassigned. Values are grouped by site area.
    """

    # Wiki
    edit_home_page = 1
    edit_wiki_pages = 2
    edit_game_resources = 3
    edit_system_pages = 4
    delete_wiki_pages = 5
    move_wiki_pages = 6

    # Submission queue
    submit_movies = 101
    edit_submissions = 102
    judge_submissions = 103
    publish_movies = 104

    # Publications
    edit_publication_metadata = 201
    set_publication_class = 202
    edit_publication_files = 203

    # Forum
    create_forum_posts = 301
    edit_forum_posts = 302
    delete_forum_posts = 303
    lock_topics = 304

    # User administration
    view_private_user_data = 401
    edit_users = 402
    assign_roles = 403

    # Site administration
    edit_roles = 9001
    see_diagnostics = 9002

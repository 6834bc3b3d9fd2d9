from __future__ import annotations

import html

import streamlit as st

from moodlift_dashboard.constants import (
    BOOK_NOW_LABEL,
    CAROUSEL_COLUMNS,
    CAROUSEL_SKELETON_COUNT,
    CONSULTANT_NAME_FALLBACK,
    CONSULTANT_TITLE_FALLBACK,
    DETAILS_LABEL,
    EMPTY_CONSULTANTS_BODY,
    EMPTY_CONSULTANTS_TITLE,
)


def consultant_card_view(consultant: dict) -> dict:
    name = str(consultant.get("full_name") or "").strip() or CONSULTANT_NAME_FALLBACK
    title = str(consultant.get("title") or "").strip() or CONSULTANT_TITLE_FALLBACK
    booking_url = str(consultant.get("booking_url") or "").strip()
    if booking_url:
        cta_label, cta_url, external = BOOK_NOW_LABEL, booking_url, True
    else:
        cta_label, cta_url, external = DETAILS_LABEL, f"/consultants/{consultant.get('id')}", False
    return {
        "id": consultant.get("id"),
        "name": name,
        "title": title,
        "picture_url": str(consultant.get("picture_url") or "").strip() or None,
        "initial": name[:1].upper(),
        "cta_label": cta_label,
        "cta_url": cta_url,
        "external": external,
    }


def carousel_pages(cards, per_page=CAROUSEL_COLUMNS):
    return [cards[idx : idx + per_page] for idx in range(0, len(cards), per_page)]


def _render_skeleton():
    cols = st.columns(CAROUSEL_SKELETON_COUNT)
    for col in cols:
        with col:
            st.markdown(
                "<div class='consultant-card skeleton'>"
                "<div class='skeleton-avatar'></div>"
                "<div class='skeleton-line'></div>"
                "<div class='skeleton-line short'></div>"
                "</div>",
                unsafe_allow_html=True,
            )


def _render_empty():
    st.markdown(
        "<div class='consultant-empty'>"
        f"<div class='section-title'>{EMPTY_CONSULTANTS_TITLE}</div>"
        f"<p>{EMPTY_CONSULTANTS_BODY}</p>"
        "</div>",
        unsafe_allow_html=True,
    )


def _render_card(card):
    if card["picture_url"]:
        st.image(card["picture_url"], width=96)
    else:
        st.markdown(f"<div class='consultant-avatar'>{html.escape(card['initial'])}</div>", unsafe_allow_html=True)
    st.markdown(f"**{html.escape(card['name'])}**")
    st.caption(card["title"])
    st.link_button(card["cta_label"], card["cta_url"], use_container_width=True)


def render_consultant_carousel(consultants, loading=False):
    if loading:
        _render_skeleton()
        return
    if not consultants:
        _render_empty()
        return

    cards = [consultant_card_view(item) for item in consultants]
    pages = carousel_pages(cards)
    page_key = "consultants.page"
    page = min(int(st.session_state.get(page_key, 0) or 0), len(pages) - 1)

    cols = st.columns(CAROUSEL_COLUMNS)
    for col, card in zip(cols, pages[page]):
        with col:
            _render_card(card)

    if len(pages) > 1:
        prev_col, label_col, next_col = st.columns([1, 3, 1])
        if prev_col.button("‹", key="consultants.prev", disabled=page == 0):
            st.session_state[page_key] = page - 1
            st.rerun()
        label_col.caption(f"{page + 1} / {len(pages)}")
        if next_col.button("›", key="consultants.next", disabled=page >= len(pages) - 1):
            st.session_state[page_key] = page + 1
            st.rerun()

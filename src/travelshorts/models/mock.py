"""Static results returned when no YouTube credentials are configured."""

from typing import List

from travelshorts.models.video import RankedResult

DEFAULT_AVATAR = 'https://yt3.ggpht.com/default-avatar=s88-c-k-c0x00ffffff-no-rj'


def mock_results(destination: str) -> List[RankedResult]:
    """Return the 8-item fixture with the destination interpolated into titles."""
    return [
        RankedResult(
            id='mock1',
            title=f'Ultimate 5 Day {destination} Itinerary | Must Visit Places',
            thumbnail='https://images.unsplash.com/photo-1476514525535-07fb3b4ae5f1?w=800&q=80',
            channel_title='Apoorva Rao',
            view_count=705000,
            duration=50,
            channel_avatar_url=(
                'https://yt3.ggpht.com/pi8WfAkOunCZLYNrXXtBGlhHWmi5khV1zkSojXrRf4kish2VRs45o8yV27buYCF91LPWowGV9FQ'
                '=s88-c-k-c0x00ffffff-no-rj'
            ),
            relevance_score=0.95,
            relevance_reason='Title matches. Transcript contains: travel, visit, city.',
        ),
        RankedResult(
            id='mock2',
            title=f'#dudhsagar water falls | {destination} travel guide',
            thumbnail='https://images.unsplash.com/photo-1504674900247-0877df9cc836?w=800&q=80',
            channel_title='urs@Raju',
            view_count=788000,
            duration=45,
            channel_avatar_url=DEFAULT_AVATAR,
            relevance_score=0.85,
            relevance_reason='Title matches. Description matches.',
        ),
        RankedResult(
            id='mock3',
            title=f'Perfect 5 days {destination} Itinerary | Travel Vlog',
            thumbnail='https://images.unsplash.com/photo-1501785888041-af3ef285b470?w=800&q=80',
            channel_title='Wandering Mi...',
            view_count=1200000,
            duration=60,
            channel_avatar_url=DEFAULT_AVATAR,
            relevance_score=0.7,
            relevance_reason='Title matches.',
        ),
        RankedResult(
            id='mock4',
            title=f'Hidden Gems in {destination} you MUST see!',
            thumbnail='https://images.unsplash.com/photo-1527631746610-bca00a040d60?w=800&q=80',
            channel_title='Travel Tips',
            view_count=523000,
            duration=55,
            channel_avatar_url=DEFAULT_AVATAR,
            relevance_score=0.6,
            relevance_reason='Title matches.',
        ),
        RankedResult(
            id='mock5',
            title=f'Best Street Food in {destination} | Food Tour',
            thumbnail='https://images.unsplash.com/photo-1555396273-367ea4eb4db5?w=800&q=80',
            channel_title='Foodie Travels',
            view_count=892000,
            duration=48,
            channel_avatar_url=DEFAULT_AVATAR,
            relevance_score=0.55,
            relevance_reason='Description matches.',
        ),
        RankedResult(
            id='mock6',
            title=f'{destination} Beach Life | Sunset Vibes',
            thumbnail='https://images.unsplash.com/photo-1507525428034-b723cf961d3e?w=800&q=80',
            channel_title='Beach Lover',
            view_count=445000,
            duration=42,
            channel_avatar_url=DEFAULT_AVATAR,
            relevance_score=0.5,
            relevance_reason='Title matches.',
        ),
        RankedResult(
            id='mock7',
            title=f'Budget Travel {destination} | Under $50/day',
            thumbnail='https://images.unsplash.com/photo-1469474968028-56623f02e42e?w=800&q=80',
            channel_title='Budget Explorer',
            view_count=1500000,
            duration=65,
            channel_avatar_url=DEFAULT_AVATAR,
            relevance_score=0.45,
            relevance_reason='Title matches. Transcript contains: travel, hotel.',
        ),
        RankedResult(
            id='mock8',
            title=f'Nightlife in {destination} | Club Hopping',
            thumbnail='https://images.unsplash.com/photo-1514525253161-7a46d19cd819?w=800&q=80',
            channel_title='Night Owl',
            view_count=678000,
            duration=52,
            channel_avatar_url=DEFAULT_AVATAR,
            relevance_score=0.4,
            relevance_reason='Description matches.',
        ),
    ]

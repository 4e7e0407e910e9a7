"""
Block API endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from namada_explorer.models.block import BlockInfo, LatestBlock
from namada_explorer.services.block_query import LatestBlocksQuery

logger = logging.getLogger(__name__)

router = APIRouter()


def get_block_query(request: Request) -> LatestBlocksQuery:
    """Pipeline instance built during application start-up"""
    return request.app.state.block_query


@router.get("/block/hash/{block_hash}", response_model=Optional[BlockInfo])
async def get_block_by_hash(block_hash: str, query: LatestBlocksQuery = Depends(get_block_query)):
    """Get block by hash; null when the block is not indexed"""
    logger.info("calling /block/hash/:block_hash")
    return await query.by_hash(block_hash)


@router.get("/block/height/{block_height}", response_model=Optional[BlockInfo])
async def get_block_by_height(block_height: int, query: LatestBlocksQuery = Depends(get_block_query)):
    """Get block by height; null when the block is not indexed"""
    logger.info("calling /block/height/:block_height")
    return await query.by_height(block_height)


@router.get("/block/last", response_model=LatestBlock)
async def get_last_block(
    num: Optional[int] = Query(None, ge=0, le=1000),
    offset: Optional[int] = Query(None, ge=0),
    query: LatestBlocksQuery = Depends(get_block_query),
):
    """Get the latest block, or the latest ``num`` blocks after ``offset``, with epochs"""
    logger.info("calling /block/last")
    return await query.latest(num, offset)
